import argparse
import json
from pathlib import Path
from typing import Optional, Sequence

import colorama
import structlog

from dmarc_report_cli.coloring import Palette
from dmarc_report_cli.loader import load_reports
from dmarc_report_cli.logging import configure_logging
from dmarc_report_cli.views import OutputFormat, create_renderer

logger = structlog.get_logger()


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dmarc-report-cli",
        description="Summarize a directory of DMARC aggregate reports.",
    )
    parser.add_argument("directory", help="Directory containing the XML reports")
    parser.add_argument(
        "-O",
        "--output-format",
        default=None,
        help="One of "
        + ", ".join(output_format.value for output_format in OutputFormat)
        + " (default: summary)",
    )
    parser.add_argument(
        "-d",
        "--domain",
        default=None,
        help="Only consider reports for this policy domain",
    )
    parser.add_argument(
        "-C",
        "--nocolor",
        default=False,
        action="store_true",
        help="Disable colored output",
    )
    parser.add_argument(
        "--configuration",
        type=argparse.FileType("r"),
        default=None,
        help="Optional JSON configuration file",
    )
    parser.add_argument(
        "--debug",
        default=False,
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None):
    parser = create_parser()
    args = parser.parse_args(argv)

    configuration = {}
    if args.configuration:
        try:
            configuration = json.load(args.configuration)
        except json.JSONDecodeError as err:
            parser.error(f"invalid configuration file: {err}")
        finally:
            args.configuration.close()
        if not isinstance(configuration, dict):
            parser.error("configuration file must contain a JSON object")

    directory = Path(args.directory)
    if not directory.is_dir():
        parser.error(f"not a directory: {args.directory}")

    color = not args.nocolor and configuration.get("color", True)
    configure_logging(configuration.get("logging", {}), debug=args.debug, color=color)
    if color:
        colorama.just_fix_windows_console()

    app = App(
        directory=directory,
        output_format=OutputFormat.from_selector(
            args.output_format or configuration.get("output_format")
        ),
        domain=args.domain or configuration.get("domain"),
        palette=Palette(enabled=color),
    )
    output = app.run()
    if output:
        print(output)


class App:
    def __init__(
        self,
        *,
        directory: Path,
        output_format: OutputFormat = OutputFormat.SUMMARY,
        domain: Optional[str] = None,
        palette: Optional[Palette] = None,
    ):
        self.directory = directory
        self.output_format = output_format
        self.domain = domain
        self.palette = palette or Palette()

    def run(self) -> str:
        result = load_reports(self.directory, self.domain)
        logger.debug(
            "Loaded reports.",
            directory=str(self.directory),
            reports=len(result.reports),
            skipped=len(result.skipped),
        )
        renderer = create_renderer(self.output_format, self.palette)
        return renderer.render(result.reports)
