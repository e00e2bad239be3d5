from __future__ import annotations

"""
Storm impact charts and report
------------------------------
This module draws the two bar charts from the aggregate tables and can
bundle them, together with the tables, into a DOCX report.

Design goals:
- Plotting and DOCX dependencies are imported lazily, so the cleaning and
  aggregation code is usable without them.
- Charts are ranked top-to-bottom in the same order as the tables.
"""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence, Union
import logging
import os

import pandas as pd

from .config import (
    ECONOMIC_COLOR,
    ECONOMIC_TITLE,
    HEALTH_COLORS,
    HEALTH_TITLE,
    TOP_N,
)
from .models import EconomicImpact, EventFrequency, HealthImpact

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class ReportConfig:
    """High-level knobs to control how the DOCX report is written."""
    title: str = "Storm Impact Report"
    subtitle: str = "NOAA Storm Events Database"
    dataset_name: str = "NOAA Storm Data (compressed CSV)"
    data_file: Optional[str] = None
    cutoff: Optional[date] = None

    # How many categories to show in tables
    top_n: int = TOP_N

    notes: List[str] = field(default_factory=list)


def _pyplot():
    try:
        import matplotlib.pyplot as plt
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib.\n"
            "Install it with: python -m pip install matplotlib"
        ) from e
    return plt


def _currency(x: float, _pos=None) -> str:
    return f"${x:,.0f}"


def _save(plt, out_path: PathLike) -> str:
    out_path = str(out_path)
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    plt.tight_layout()
    plt.savefig(out_path, dpi=200)
    plt.close()
    logger.info("Wrote chart %s", out_path)
    return out_path


# -----------------------------
# Charts
# -----------------------------

def render_health_chart(long: pd.DataFrame, out_path: PathLike, *, title: str = HEALTH_TITLE) -> str:
    """Grouped horizontal bars: fatalities vs injuries per event type.

    `long` is the output of `aggregate.health_long`.
    """
    if long.empty:
        raise ValueError("No events to report on (health table is empty).")
    plt = _pyplot()
    import numpy as np

    categories = list(dict.fromkeys(long["EVTYPE"]))
    y = np.arange(len(categories))
    height = 0.8 / len(HEALTH_COLORS)

    plt.figure(figsize=(10, max(4, 0.4 * len(categories))))
    for i, (label, color) in enumerate(HEALTH_COLORS.items()):
        part = long[long["IMPACT_TYPE"] == label].set_index("EVTYPE").reindex(categories)
        offset = (i - (len(HEALTH_COLORS) - 1) / 2) * height
        plt.barh(y + offset, part["IMPACT_COUNT"].fillna(0), height=height, color=color, label=label)

    plt.yticks(y, categories)
    plt.gca().invert_yaxis()
    plt.gca().xaxis.set_major_formatter(lambda x, _pos: f"{x:,.0f}")
    plt.title(title)
    plt.xlabel("Impact Count")
    plt.ylabel("Event Type")
    plt.legend(title="Impact")
    return _save(plt, out_path)


def render_economic_chart(economic: pd.DataFrame, out_path: PathLike, *, top_n: int = TOP_N,
                          title: str = ECONOMIC_TITLE) -> str:
    """One horizontal bar of combined cost per event type (top `top_n`)."""
    top = economic.head(top_n)
    if top.empty:
        raise ValueError("No events to report on (economic table is empty).")
    plt = _pyplot()

    plt.figure(figsize=(10, max(4, 0.4 * len(top))))
    plt.barh(top["EVTYPE"], top["TOTAL_COST"], color=ECONOMIC_COLOR)
    plt.gca().invert_yaxis()
    plt.gca().xaxis.set_major_formatter(_currency)
    plt.xticks(rotation=30, ha="right")
    plt.title(title)
    plt.xlabel("Total Economic Cost (USD)")
    plt.ylabel("Event Type")
    return _save(plt, out_path)


# -----------------------------
# DOCX report
# -----------------------------

def generate_docx_report(
    health: Sequence[HealthImpact],
    economic: Sequence[EconomicImpact],
    frequency: Sequence[EventFrequency],
    out_path: PathLike,
    *,
    chart_paths: Sequence[str] = (),
    config: Optional[ReportConfig] = None,
    records_in_scope: Optional[int] = None,
) -> str:
    """Write a DOCX report with the charts and the top-N tables."""
    config = config or ReportConfig()

    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
        p = doc.add_paragraph()
        r = p.add_run(text)
        r.bold = bold
        r.italic = italic
        r.font.size = Pt(size)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _kv(key: str, value: str) -> None:
        p = doc.add_paragraph()
        r = p.add_run(f"{key}: ")
        r.bold = True
        p.add_run(value)

    def _table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        t = doc.add_table(rows=1, cols=len(headers))
        for cell, text in zip(t.rows[0].cells, headers):
            cell.text = text
        for row in rows:
            for cell, text in zip(t.add_row().cells, row):
                cell.text = text

    _center_title(config.title, 22, bold=True)
    _center_title(config.subtitle, 12, italic=True)

    doc.add_paragraph("")
    _kv("Dataset", config.dataset_name)
    if config.data_file:
        _kv("Data file", config.data_file)
    if config.cutoff is not None:
        _kv("Events from", config.cutoff.isoformat())
    if records_in_scope is not None:
        _kv("Records in scope", f"{records_in_scope:,}")

    if chart_paths:
        doc.add_paragraph("")
        doc.add_heading("Visualizations", level=1)
        for path in chart_paths:
            doc.add_picture(path, width=Inches(6.5))
            doc.add_paragraph("")

    doc.add_heading("Population health impact", level=1)
    doc.add_paragraph(f"Top {config.top_n} event types by total injuries.")
    _table(
        ["Event Type", "Fatalities", "Injuries"],
        [[h.event_type, f"{h.fatalities:,}", f"{h.injuries:,}"] for h in health[:config.top_n]],
    )

    doc.add_paragraph("")
    doc.add_heading("Economic impact", level=1)
    doc.add_paragraph(f"Top {config.top_n} event types by combined property and crop damage.")
    _table(
        ["Event Type", "Property (US$)", "Crops (US$)", "Total (US$)"],
        [[e.event_type, _currency(e.property_cost), _currency(e.crop_cost), _currency(e.total_cost)]
         for e in economic[:config.top_n]],
    )

    if frequency:
        doc.add_paragraph("")
        doc.add_heading("Frequent casualty-causing events", level=1)
        _table(
            ["Event Type", "Events", "Casualties"],
            [[f.event_type, f"{f.event_count:,}", f"{f.casualties:,}"] for f in frequency],
        )

    if config.notes:
        doc.add_heading("Notes", level=1)
        for note in config.notes:
            doc.add_paragraph(note, style="List Bullet")

    # -----------------------------
    # Reproducibility footer
    # -----------------------------
    doc.add_paragraph("")
    doc.add_heading("Reproducibility footer", level=1)
    from . import __version__
    from datetime import datetime as _dt
    doc.add_paragraph(f"stormimpact version: {__version__}")
    doc.add_paragraph(f"Report generated at: {_dt.now().isoformat(timespec='seconds')}")

    out_path = str(out_path)
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    logger.info("Wrote report %s", out_path)
    return out_path
