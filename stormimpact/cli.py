"""
stormimpact Command Line Interface (CLI)
========================================

Runs the storm impact report once:

    python -m stormimpact.cli --data data/StormData.csv.bz2 --out output

The dataset is downloaded only when the --data file does not exist yet
(or when --force-download is given). Charts and tables land in --out.
"""

from __future__ import annotations
import argparse
import logging
import sys
from datetime import date, datetime
from typing import List, Optional

from . import __version__
from .aggregate import economic_records, health_records
from .config import (
    CUTOFF_DATE,
    DEFAULT_DATA_PATH,
    DEFAULT_OUTPUT_DIR,
    MIN_FREQUENCY,
    SOURCE_URL,
    TOP_N,
    PipelineConfig,
)
from .pipeline import StormReport, run_pipeline


def _iso_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="stormimpact",
        description="Health and economic impact of US storm events by event type.",
    )
    ap.add_argument("--url", default=SOURCE_URL, help="Dataset URL (compressed CSV)")
    ap.add_argument("--data", default=str(DEFAULT_DATA_PATH), help="Local path of the dataset file")
    ap.add_argument("--out", default=str(DEFAULT_OUTPUT_DIR), help="Directory for charts and tables")
    ap.add_argument("--cutoff", type=_iso_date, default=CUTOFF_DATE, help="First event date kept (YYYY-MM-DD)")
    ap.add_argument("--end", type=_iso_date, default=None, help="Last event date kept (YYYY-MM-DD)")
    ap.add_argument("--top", type=int, default=TOP_N, help="Event types per chart")
    ap.add_argument("--min-frequency", type=int, default=MIN_FREQUENCY,
                    help="Minimum casualty-causing events for the frequency table")
    ap.add_argument("--docx", default=None, help="Also write a DOCX report to this path")
    ap.add_argument("--force-download", action="store_true", help="Download even if --data exists")
    ap.add_argument("--no-charts", action="store_true", help="Skip chart rendering")
    ap.add_argument("--no-export", action="store_true", help="Skip CSV/JSON table export")
    ap.add_argument("--show", type=int, default=10, help="Rows of each table to print")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def config_from_args(args: argparse.Namespace) -> PipelineConfig:
    return PipelineConfig(
        source_url=args.url,
        data_path=args.data,
        output_dir=args.out,
        cutoff=args.cutoff,
        end=args.end,
        top_n=args.top,
        min_frequency=args.min_frequency,
        force_download=args.force_download,
        render=not args.no_charts,
        export=not args.no_export,
        docx_path=args.docx,
    )


def print_summary(report: StormReport, n: int = 10) -> None:
    print(f"Records analysed: {len(report.cleaned)}")
    print(f"\nTop {n} event types by injuries:")
    for h in health_records(report.health.head(n)):
        print(f"  {h.event_type:<30} injuries={h.injuries:>8,} fatalities={h.fatalities:>6,}")
    print(f"\nTop {n} event types by economic cost:")
    for e in economic_records(report.economic.head(n)):
        print(f"  {e.event_type:<30} total=${e.total_cost:>18,.0f}")
    for path in report.chart_paths:
        print(f"Chart written to {path}")
    if report.docx_path:
        print(f"Report written to {report.docx_path}")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the stormimpact CLI.

    1) Parse arguments into a PipelineConfig
    2) Run the pipeline
    3) Print a short summary
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        report = run_pipeline(config_from_args(args))
    except Exception as e:
        logging.getLogger(__name__).debug("Run failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print_summary(report, args.show)
    return 0


if __name__ == "__main__":
    sys.exit(main())
