from enum import Enum
from typing import List, Mapping, Optional, Sequence, Type

from dmarc_report_cli.coloring import Palette
from dmarc_report_cli.dmarc_metrics import DmarcMetrics, PassFailCounts, aggregate
from dmarc_report_cli.report import Record, Report
from dmarc_report_cli.serialization import dumps_reports

TOP_FAILING_IPS = 10


class OutputFormat(Enum):
    SUMMARY = "summary"
    STREAM = "stream"
    SOURCE_IP = "sourceip"
    DOMAIN = "domain"
    HEADER_FROM = "from"
    JSON = "json"

    @classmethod
    def from_selector(cls, selector: Optional[str]) -> "OutputFormat":
        try:
            return cls(selector)
        except ValueError:
            return cls.SUMMARY


class Renderer:
    def __init__(self, palette: Palette):
        self.palette = palette

    def render(self, reports: Sequence[Report]) -> str:
        raise NotImplementedError()

    def _pass_fail(self, counts: PassFailCounts, pct: float) -> str:
        return (
            f"{self.palette.green('pass')} {counts.passed} / "
            f"{self.palette.red('fail')} {counts.failed} - "
            f"{self.palette.percentage(pct)}% passed"
        )


class SummaryRenderer(Renderer):
    def render(self, reports: Sequence[Report]) -> str:
        metrics = aggregate(reports)
        lines = [
            "***DMARC report summary",
            "",
            f"{'Reports:':>12} {metrics.report_count}",
            f"{'Records:':>12} {metrics.record_count}",
            f"{'Volume:':>12} {metrics.volume_total}",
        ]
        for label, counts in (
            ("SPF:", metrics.spf),
            ("DKIM:", metrics.dkim),
            ("DMARC:", metrics.dmarc),
        ):
            lines.append(
                f"{label:>12} "
                + self._pass_fail(counts, metrics.pass_percentage(counts))
            )
        lines.append("")
        lines.append(f"{'[IP ADDR]':>12}")
        lines.append(f"{'passed:':>12} {len(metrics.passing_ips)}")
        for ip, volume in metrics.passing_ips.items():
            lines.append(f"{'':>12} {self.palette.green(ip)} ({volume})")
        lines.append(f"{'failed:':>12} {len(metrics.failing_ips)}")
        for ip, volume in metrics.top_failing_ips(TOP_FAILING_IPS):
            lines.append(f"{'':>12} {self.palette.red(ip)} ({volume})")
        return "\n".join(lines)


class StreamRenderer(Renderer):
    def _format_record(self, org: str, record: Record) -> str:
        header_from = ",".join(record.header_from)
        spf = self.palette.outcome("P" if record.spf_pass else "F", record.spf_pass)
        dkim = self.palette.outcome(
            "P" if record.dkim_pass else "F", record.dkim_pass
        )
        return (
            f"{org:<16.16} {header_from:<24.24} SPF:{spf} DKIM:{dkim} "
            f"{record.disposition:<10} {record.count:>8} {record.source_ip}"
        )

    def render(self, reports: Sequence[Report]) -> str:
        return "\n".join(
            self._format_record(report.org, record)
            for report in reports
            for record in report.records
        )


class SourceIpRenderer(Renderer):
    def render(self, reports: Sequence[Report]) -> str:
        metrics = aggregate(reports)
        return "\n".join(
            f"{volume:>8} {self.palette.red(ip)}"
            for ip, volume in metrics.top_failing_ips()
        )


class DomainRenderer(Renderer):
    def render(self, reports: Sequence[Report]) -> str:
        metrics = aggregate(reports)
        return "\n".join(
            f"{domain.domain:<32} "
            + self._pass_fail(domain.counts, metrics.pass_percentage(domain.counts))
            for domain in metrics.domains.values()
        )


class HeaderFromRenderer(Renderer):
    def _format_domain(self, metrics: DmarcMetrics, domain_key: str) -> List[str]:
        domain = metrics.domains[domain_key]
        lines = [self.palette.cyan(domain.domain)]
        for header_from, counts in domain.header_from.items():
            lines.append(
                f"    {header_from:<32} "
                + self._pass_fail(counts, metrics.pass_percentage(counts))
            )
        return lines

    def render(self, reports: Sequence[Report]) -> str:
        metrics = aggregate(reports)
        blocks = [
            "\n".join(self._format_domain(metrics, domain_key))
            for domain_key in metrics.domains
        ]
        return "\n\n".join(blocks)


class JsonRenderer(Renderer):
    def render(self, reports: Sequence[Report]) -> str:
        return dumps_reports(reports)


renderers: Mapping[OutputFormat, Type[Renderer]] = {
    OutputFormat.SUMMARY: SummaryRenderer,
    OutputFormat.STREAM: StreamRenderer,
    OutputFormat.SOURCE_IP: SourceIpRenderer,
    OutputFormat.DOMAIN: DomainRenderer,
    OutputFormat.HEADER_FROM: HeaderFromRenderer,
    OutputFormat.JSON: JsonRenderer,
}


def create_renderer(output_format: OutputFormat, palette: Palette) -> Renderer:
    return renderers[output_format](palette)
