"""
Report pipeline
===============

Runs the whole report once, top to bottom:

1) Download dataset (skipped when the file is already on disk)
2) Load CSV -> DataFrame, keep the 8 analysis columns
3) Date filter -> cost columns -> label rewrites
4) Aggregate -> health / economic / frequency tables
5) Render charts, export tables, optional DOCX report

Every stage completes before the next starts; any error aborts the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import pandas as pd

from . import aggregate, cleaning
from .acquire import download_dataset
from .config import (
    CUTOFF_DATE,
    DEFAULT_SPAN,
    ECONOMIC_CHART_FILE,
    ECONOMIC_TITLE_TEMPLATE,
    HEALTH_CHART_FILE,
    HEALTH_TITLE_TEMPLATE,
    PipelineConfig,
)
from .loader import load_storm_csv, select_columns

logger = logging.getLogger(__name__)


@dataclass
class StormReport:
    """Everything a run produced. Tables are already sorted."""
    config: PipelineConfig
    cleaned: pd.DataFrame
    health: pd.DataFrame
    economic: pd.DataFrame
    frequency: pd.DataFrame
    chart_paths: List[str] = field(default_factory=list)
    export_paths: List[str] = field(default_factory=list)
    docx_path: Optional[str] = None

    @property
    def health_long(self) -> pd.DataFrame:
        return aggregate.health_long(self.health, self.config.top_n)


def clean(raw: pd.DataFrame, config: PipelineConfig) -> pd.DataFrame:
    """Projection, date filter, cost and label normalisation."""
    df = select_columns(raw)
    df = cleaning.filter_by_date(df, config.cutoff, config.end)
    df = cleaning.add_cost_columns(df)
    df = cleaning.normalize_labels(df, config.label_rewrites)
    return df


def build_report(raw: pd.DataFrame, config: PipelineConfig) -> StormReport:
    """Clean and aggregate an already-loaded table (no IO)."""
    df = clean(raw, config)
    return StormReport(
        config=config,
        cleaned=df,
        health=aggregate.health_impact(df),
        economic=aggregate.economic_impact(df),
        frequency=aggregate.event_frequency(df, config.min_frequency),
    )


def year_span(report: StormReport) -> str:
    """Year range shown in chart titles, e.g. "1996–2011" or "2011"."""
    config = report.config
    if config.cutoff == CUTOFF_DATE and config.end is None:
        return DEFAULT_SPAN
    if config.end is not None:
        last = config.end.year
    elif report.cleaned.empty or report.cleaned["EVENT_DATE"].isna().all():
        last = config.cutoff.year
    else:
        last = int(report.cleaned["EVENT_DATE"].max().year)
    first = config.cutoff.year
    return str(first) if first == last else f"{first}–{last}"


def render_charts(report: StormReport) -> List[str]:
    from .report import render_economic_chart, render_health_chart

    out_dir = report.config.output_dir
    span = year_span(report)
    paths = [
        render_health_chart(
            report.health_long, out_dir / HEALTH_CHART_FILE,
            title=HEALTH_TITLE_TEMPLATE.format(span=span),
        ),
        render_economic_chart(
            report.economic, out_dir / ECONOMIC_CHART_FILE, top_n=report.config.top_n,
            title=ECONOMIC_TITLE_TEMPLATE.format(span=span),
        ),
    ]
    report.chart_paths = paths
    return paths


def export_tables(report: StormReport, out_dir: Optional[Path] = None) -> List[str]:
    """Write the three summary tables as CSV and JSON."""
    out_dir = Path(out_dir or report.config.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written: List[str] = []
    for name, table in (
        ("health_impact", report.health),
        ("economic_impact", report.economic),
        ("event_frequency", report.frequency),
    ):
        csv_path = out_dir / f"{name}.csv"
        json_path = out_dir / f"{name}.json"
        table.to_csv(csv_path, index=False)
        table.to_json(json_path, orient="records", indent=2)
        written.extend([str(csv_path), str(json_path)])
    logger.info("Exported %d table files to %s", len(written), out_dir)
    report.export_paths = written
    return written


def write_docx(report: StormReport, out_path: Path) -> str:
    from .report import ReportConfig, generate_docx_report

    cfg = ReportConfig(
        data_file=report.config.data_path.name,
        cutoff=report.config.cutoff,
        top_n=report.config.top_n,
        notes=[
            "Damage figures use the K/M/B unit suffix; any other suffix counts as zero.",
            "Event types are grouped after rewriting: "
            + "; ".join(f"{k} -> {v}" for k, v in report.config.label_rewrites.items()),
        ],
    )
    report.docx_path = generate_docx_report(
        aggregate.health_records(report.health),
        aggregate.economic_records(report.economic),
        aggregate.frequency_records(report.frequency),
        out_path,
        chart_paths=report.chart_paths,
        config=cfg,
        records_in_scope=len(report.cleaned),
    )
    return report.docx_path


def run_pipeline(config: Optional[PipelineConfig] = None) -> StormReport:
    """Run the full report with an explicit configuration."""
    config = config or PipelineConfig()

    path = download_dataset(config.source_url, config.data_path, force=config.force_download)
    raw = load_storm_csv(path)
    report = build_report(raw, config)

    if config.render:
        render_charts(report)
    if config.export:
        export_tables(report)
    if config.docx_path is not None:
        write_docx(report, config.docx_path)
    return report
