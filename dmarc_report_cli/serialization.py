import json
from dataclasses import dataclass
from typing import Iterable, List

from dataclasses_serialization.json import JSONSerializer

from dmarc_report_cli.report import AuthResult, Record, Report


@dataclass
class DateRangeDocument:
    begin: int
    end: int


@dataclass
class ReportMetadataDocument:
    org: str
    date_range: DateRangeDocument


@dataclass
class PolicyDocument:
    domain: str
    adkim: str
    aspf: str
    p: str


@dataclass
class PolicyEvaluatedDocument:
    disposition: str
    dkim_pass: bool
    spf_pass: bool


@dataclass
class AuthResultDocument:
    domain: str
    result: str


@dataclass
class AuthResultsDocument:
    dkim: List[AuthResultDocument]
    spf: List[AuthResultDocument]


@dataclass
class RecordDocument:
    source_ip: str
    count: int
    policy_evaluated: PolicyEvaluatedDocument
    header_from: List[str]
    auth_results: AuthResultsDocument


@dataclass
class ReportDocument:
    report_metadata: ReportMetadataDocument
    policy: PolicyDocument
    records: List[RecordDocument]


def _auth_result_documents(results: Iterable[AuthResult]) -> List[AuthResultDocument]:
    return [AuthResultDocument(domain=r.domain, result=r.result) for r in results]


def record_document(record: Record) -> RecordDocument:
    return RecordDocument(
        source_ip=record.source_ip,
        count=record.count,
        policy_evaluated=PolicyEvaluatedDocument(
            disposition=record.disposition,
            dkim_pass=record.dkim_pass,
            spf_pass=record.spf_pass,
        ),
        header_from=list(record.header_from),
        auth_results=AuthResultsDocument(
            dkim=_auth_result_documents(record.auth_results.dkim),
            spf=_auth_result_documents(record.auth_results.spf),
        ),
    )


def report_document(report: Report) -> ReportDocument:
    return ReportDocument(
        report_metadata=ReportMetadataDocument(
            org=report.org,
            date_range=DateRangeDocument(
                begin=int(report.date_range.begin.timestamp()),
                end=int(report.date_range.end.timestamp()),
            ),
        ),
        policy=PolicyDocument(
            domain=report.policy.domain,
            adkim=report.policy.adkim,
            aspf=report.policy.aspf,
            p=report.policy.p,
        ),
        records=[record_document(record) for record in report.records],
    )


def dumps_reports(reports: Iterable[Report]) -> str:
    documents = [report_document(report) for report in reports]
    return json.dumps(JSONSerializer.serialize(documents), indent=2)
