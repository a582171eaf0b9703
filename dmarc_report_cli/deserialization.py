import gzip
import io
import os.path
from datetime import datetime, timezone
from typing import Callable, Generator, Mapping, Optional, TypeVar
from zipfile import ZipFile

import structlog
from xsdata.formats.dataclass.context import XmlContext
from xsdata.formats.dataclass.parsers import XmlParser
from xsdata.formats.dataclass.parsers.config import ParserConfig
from xsdata.formats.dataclass.parsers.handlers import XmlEventHandler

from dmarc_report_cli.model.dmarc_aggregate_report import (
    AuthResultType,
    Feedback,
    RecordType,
)
from dmarc_report_cli.report import (
    AuthResult,
    AuthResults,
    DateRange,
    Policy,
    Record,
    Report,
)

logger = structlog.get_logger()

T = TypeVar("T")


class ReportExtractionError(Exception):
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    def __str__(self):
        return f"Failed to extract report: {self.reason}"


class MissingFieldError(ReportExtractionError):
    def __init__(self, path: str):
        super().__init__(f"required element '{path}' is missing")
        self.path = path


def handle_application_gzip(
    _filename: str, gzip_bytes: bytes
) -> Generator[bytes, None, None]:
    yield gzip.decompress(gzip_bytes)


def handle_application_zip(
    _filename: str, zip_bytes: bytes
) -> Generator[bytes, None, None]:
    with ZipFile(io.BytesIO(zip_bytes), "r") as zip_file:
        for name in zip_file.namelist():
            with zip_file.open(name, "r") as f:
                yield f.read()


def handle_text_xml(_filename: str, content: bytes) -> Generator[bytes, None, None]:
    yield content


file_extension_handlers: Mapping[str, Callable[..., Generator[bytes, None, None]]] = {
    ".gz": handle_application_gzip,
    ".zip": handle_application_zip,
}


def get_payloads_from_file(
    filename: str, content: bytes
) -> Generator[bytes, None, None]:
    _, file_extension = os.path.splitext(filename)
    handler = file_extension_handlers.get(file_extension.lower(), handle_text_xml)
    return handler(filename, content)


def parse_feedback(xml: bytes) -> Feedback:
    """Parse raw XML, honouring its encoding declaration."""
    parser = XmlParser(
        context=XmlContext(),
        config=ParserConfig(fail_on_unknown_properties=False),
        handler=XmlEventHandler,
    )
    return parser.from_bytes(xml, Feedback)


def get_reports_from_file(
    filename: str, content: bytes, domain_filter: Optional[str] = None
) -> Generator[Report, None, None]:
    for payload in get_payloads_from_file(filename, content):
        report = convert_to_report(parse_feedback(payload), domain_filter)
        if report is None:
            logger.debug("Report excluded by domain filter.", filename=filename)
            continue
        yield report


def is_pass(result: Optional[str]) -> bool:
    return result is not None and result.lower() == "pass"


def _require(value: Optional[T], path: str) -> T:
    if value is None:
        raise MissingFieldError(path)
    return value


def _parse_int(value: str, path: str) -> int:
    try:
        return int(value)
    except ValueError as err:
        raise ReportExtractionError(f"'{path}' is not an integer: {value!r}") from err


def _parse_timestamp(value: str, path: str) -> datetime:
    timestamp = _parse_int(value, path)
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as err:
        raise ReportExtractionError(
            f"'{path}' is out of range: {timestamp}"
        ) from err


def _convert_auth_results(auth_results: Optional[AuthResultType]) -> AuthResults:
    if auth_results is None:
        return AuthResults()
    return AuthResults(
        dkim=tuple(
            AuthResult(domain=dkim.domain or "", result=dkim.result or "")
            for dkim in auth_results.dkim
        ),
        spf=tuple(
            AuthResult(domain=spf.domain or "", result=spf.result or "")
            for spf in auth_results.spf
        ),
    )


def convert_to_record(record: RecordType) -> Record:
    row = _require(record.row, "record/row")
    policy_evaluated = _require(
        row.policy_evaluated, "record/row/policy_evaluated"
    )
    count = _parse_int(_require(row.count, "record/row/count"), "record/row/count")
    if count < 0:
        raise ReportExtractionError(f"'record/row/count' is negative: {count}")

    return Record(
        source_ip=_require(row.source_ip, "record/row/source_ip"),
        count=count,
        disposition=_require(
            policy_evaluated.disposition, "record/row/policy_evaluated/disposition"
        ),
        dkim_pass=is_pass(
            _require(policy_evaluated.dkim, "record/row/policy_evaluated/dkim")
        ),
        spf_pass=is_pass(
            _require(policy_evaluated.spf, "record/row/policy_evaluated/spf")
        ),
        header_from=tuple(
            identifiers.header_from or "" for identifiers in record.identifiers
        ),
        auth_results=_convert_auth_results(record.auth_results),
    )


def convert_to_report(
    feedback: Feedback, domain_filter: Optional[str] = None
) -> Optional[Report]:
    """Normalize a parsed aggregate report.

    Returns ``None`` if ``domain_filter`` is given and the published policy
    domain does not match it (case-insensitively). Raises
    :class:`ReportExtractionError` if a required value is missing or invalid.
    """
    metadata = _require(feedback.report_metadata, "report_metadata")
    org = _require(metadata.org_name, "report_metadata/org_name")
    date_range = _require(metadata.date_range, "report_metadata/date_range")
    begin = _parse_timestamp(
        _require(date_range.begin, "report_metadata/date_range/begin"),
        "report_metadata/date_range/begin",
    )
    end = _parse_timestamp(
        _require(date_range.end, "report_metadata/date_range/end"),
        "report_metadata/date_range/end",
    )

    if feedback.policy_published:
        published = feedback.policy_published
        policy = Policy(
            domain=published.domain or "",
            adkim=published.adkim or "",
            aspf=published.aspf or "",
            p=published.p or "",
        )
    else:
        policy = Policy()

    if domain_filter is not None and policy.domain.lower() != domain_filter.lower():
        return None

    return Report(
        org=org,
        date_range=DateRange(begin=begin, end=end),
        policy=policy,
        records=tuple(convert_to_record(record) for record in feedback.record),
    )
