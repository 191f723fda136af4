#!/usr/bin/env python3
"""
natstats CLI - Command Line Interface

Reads a NAT translation table dump (file or stdin) and prints
per-protocol statistics.

Usage:
    show ip nat translations verbose | natstats
    natstats translations.txt
    natstats translations.txt -o report.json --records
"""

import argparse
import sys
from datetime import timedelta
from pathlib import Path
from typing import BinaryIO

import structlog

from natstats.analysis.errors import NATParseError
from natstats.analysis.models import NATProtocol, ParserProgress
from natstats.analysis.parser import parse_stream
from natstats.analysis.statistics import compute_statistics, NATStatistics
from natstats.analysis.store import NATRecords, protocol_is
from natstats.config import get_settings
from natstats.logging_config import configure_logging
from natstats.output.console import get_console, NATStatsConsole
from natstats.output.report import build_report, write_report

logger = structlog.get_logger(__name__)

STDIN_NAME = "-"


# =============================================================================
# Analysis Runner
# =============================================================================


def run_analysis(
    stream: BinaryIO,
    source: str,
    console: NATStatsConsole,
    threshold: timedelta,
) -> tuple[NATRecords, NATStatistics]:
    """
    Parse the dump and compute statistics with console output.

    Args:
        stream: Binary stream holding the dump
        source: Display name of the input
        console: Console instance for output
        threshold: Long remaining lifetime threshold

    Returns:
        (records, statistics)
    """
    settings = get_settings()

    console.print_parsing_start(source)

    progress = console.create_progress()
    parse_task = progress.add_task("[cyan]Parsing translations...", total=None, records=0)

    def update_progress(prog: ParserProgress) -> None:
        """Callback to update the progress display."""
        progress.update(parse_task, records=prog.records_parsed)

    with progress:
        records = parse_stream(
            stream,
            progress_callback=update_progress,
            batch_size=settings.progress_batch_size,
            chunk_size=settings.read_chunk_size,
            header=settings.header_bytes,
        )

    console.print_parsing_complete(
        records=len(records),
        static_records=len(records.where(protocol_is(NATProtocol.STATIC))),
    )

    console.print_statistics_start()
    stats = compute_statistics(records, threshold)
    console.print_statistics(stats)

    return records, stats


# =============================================================================
# Main Entry Point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="natstats",
        description="natstats - NAT translation table statistics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    natstats translations.txt              # Analyze a saved dump
    cat translations.txt | natstats        # Read the dump from stdin
    natstats dump.txt -t 1800              # Count entries with more than 30m left
    natstats dump.txt -o report.json       # Save statistics to a JSON file
""",
    )

    parser.add_argument(
        "input",
        nargs="?",
        default=STDIN_NAME,
        help="Translation dump to read (default: stdin)",
    )

    parser.add_argument(
        "-t", "--threshold",
        type=int,
        metavar="SECONDS",
        help="Long remaining lifetime threshold in seconds (default: from settings, 3600)",
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        help="Save analysis results to JSON file",
    )

    parser.add_argument(
        "--records",
        action="store_true",
        help="Include every parsed translation in the JSON report",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Do not print the banner",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        fmt=settings.log_format,
    )

    if args.threshold is not None and args.threshold <= 0:
        parser.error("--threshold must be a positive number of seconds")

    threshold = (
        timedelta(seconds=args.threshold)
        if args.threshold is not None
        else settings.long_lifetime_threshold
    )

    console = get_console()
    if not args.quiet:
        console.print_banner()

    try:
        if args.input == STDIN_NAME:
            records, stats = run_analysis(sys.stdin.buffer, "stdin", console, threshold)
        else:
            input_path = Path(args.input).expanduser()
            if not input_path.is_file():
                console.print_error(f"File not found: {input_path}")
                return 1
            with open(input_path, "rb") as f:
                records, stats = run_analysis(f, input_path.name, console, threshold)

        if args.output:
            report = build_report(
                stats,
                records=records if args.records else None,
                source=args.input,
            )
            output_path = write_report(Path(args.output), report)
            console.print_report_saved(str(output_path))

        return 0

    except KeyboardInterrupt:
        console.console.print("\n\n[yellow]Analysis interrupted by user[/yellow]")
        return 130
    except (NATParseError, OSError) as e:
        logger.error("analysis_failed", error=str(e))
        console.print_analysis_error(str(e))
        if args.verbose:
            import traceback
            console.console.print(traceback.format_exc(), style="dim", markup=False)
        return 1


if __name__ == "__main__":
    sys.exit(main())
