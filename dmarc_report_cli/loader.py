import gzip
import os
import zipfile
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union
from xml.etree.ElementTree import ParseError

import structlog
from xsdata.exceptions import ParserError

from dmarc_report_cli.deserialization import (
    ReportExtractionError,
    get_reports_from_file,
)
from dmarc_report_cli.report import Report

logger = structlog.get_logger()

recoverable_errors = (
    ReportExtractionError,
    ParserError,
    ParseError,
    OSError,
    EOFError,
    zlib.error,
    zipfile.BadZipFile,
    gzip.BadGzipFile,
)


@dataclass
class LoadResult:
    reports: List[Report] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


def report_sort_key(filename: str) -> int:
    """Begin timestamp embedded as ``receiver!domain!begin!end.xml``, else 0."""
    segments = filename.split("!")
    if len(segments) < 3:
        return 0
    try:
        return int(segments[2])
    except ValueError:
        return 0


def list_report_files(directory: Union[str, Path]) -> List[str]:
    return sorted(sorted(os.listdir(directory)), key=report_sort_key)


def load_reports(
    directory: Union[str, Path], domain_filter: Optional[str] = None
) -> LoadResult:
    directory = Path(directory)
    result = LoadResult()
    for filename in list_report_files(directory):
        try:
            with open(directory / filename, "rb") as f:
                content = f.read()
            reports = list(get_reports_from_file(filename, content, domain_filter))
        except recoverable_errors as err:
            logger.warning(
                f"Cannot recognize {filename}", filename=filename, error=str(err)
            )
            result.skipped.append(filename)
            continue
        logger.debug("Loaded report file.", filename=filename, reports=len(reports))
        result.reports.extend(reports)
    return result
