from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from dmarc_report_cli.report import Record, Report


def percentage(count: int, total: int) -> float:
    if total == 0:
        return 0.0
    return count / total * 100


@dataclass
class PassFailCounts:
    passed: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.passed + self.failed

    def update(self, count: int, passed: bool):
        if passed:
            self.passed += count
        else:
            self.failed += count


@dataclass
class DomainMetrics:
    domain: str
    counts: PassFailCounts = field(default_factory=PassFailCounts)
    header_from: Dict[str, PassFailCounts] = field(default_factory=dict)

    def update(self, record: Record):
        self.counts.update(record.count, record.dmarc_pass)
        for header_from in record.header_from:
            if header_from not in self.header_from:
                self.header_from[header_from] = PassFailCounts()
            self.header_from[header_from].update(record.count, record.dmarc_pass)


@dataclass
class DmarcMetrics:
    """Count-weighted totals over a set of reports.

    ``domains`` is keyed by the lower-cased policy domain and keeps the
    spelling and position of the first report seen for that domain.
    """

    report_count: int = 0
    record_count: int = 0
    volume_total: int = 0
    spf: PassFailCounts = field(default_factory=PassFailCounts)
    dkim: PassFailCounts = field(default_factory=PassFailCounts)
    dmarc: PassFailCounts = field(default_factory=PassFailCounts)
    passing_ips: Dict[str, int] = field(default_factory=dict)
    failing_ips: Dict[str, int] = field(default_factory=dict)
    domains: Dict[str, DomainMetrics] = field(default_factory=dict)

    def update(self, report: Report):
        self.report_count += 1
        domain_key = report.policy.domain.lower()
        if domain_key not in self.domains:
            self.domains[domain_key] = DomainMetrics(report.policy.domain)
        domain = self.domains[domain_key]

        for record in report.records:
            self.record_count += 1
            self.volume_total += record.count
            self.spf.update(record.count, record.spf_pass)
            self.dkim.update(record.count, record.dkim_pass)
            self.dmarc.update(record.count, record.dmarc_pass)

            ips = self.passing_ips if record.dmarc_pass else self.failing_ips
            if record.source_ip not in ips:
                ips[record.source_ip] = 0
            ips[record.source_ip] += record.count

            domain.update(record)

    def top_failing_ips(self, limit: Optional[int] = None) -> List[Tuple[str, int]]:
        # Ties end up in reverse first-seen order.
        ranked = list(
            reversed(sorted(self.failing_ips.items(), key=lambda item: item[1]))
        )
        if limit is not None:
            ranked = ranked[:limit]
        return ranked

    def pass_percentage(self, counts: PassFailCounts) -> float:
        """Share of ``counts.passed`` in the volume of all reports."""
        return percentage(counts.passed, self.volume_total)


def aggregate(reports: Iterable[Report]) -> DmarcMetrics:
    metrics = DmarcMetrics()
    for report in reports:
        metrics.update(report)
    return metrics
