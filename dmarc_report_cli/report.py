from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple


@dataclass(frozen=True)
class DateRange:
    begin: datetime
    end: datetime


@dataclass(frozen=True)
class Policy:
    domain: str = ""
    adkim: str = ""
    aspf: str = ""
    p: str = ""


@dataclass(frozen=True)
class AuthResult:
    domain: str
    result: str


@dataclass(frozen=True)
class AuthResults:
    dkim: Tuple[AuthResult, ...] = ()
    spf: Tuple[AuthResult, ...] = ()


@dataclass(frozen=True)
class Record:
    """One row of an aggregate report, standing for ``count`` messages."""

    source_ip: str
    count: int
    disposition: str
    dkim_pass: bool
    spf_pass: bool
    header_from: Tuple[str, ...] = ()
    auth_results: AuthResults = field(default_factory=AuthResults)

    @property
    def dmarc_pass(self) -> bool:
        return self.spf_pass or self.dkim_pass


@dataclass(frozen=True)
class Report:
    org: str
    date_range: DateRange
    policy: Policy
    records: Tuple[Record, ...] = ()
