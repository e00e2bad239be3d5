"""
Cleaning stages
===============

Three small transformations applied to the projected table:

1) Temporal filter -> parse BGN_DATE, keep rows on/after the cutoff
2) Cost normalizer -> magnitude x unit multiplier, for property and crops
3) Label normalizer -> rewrite a fixed set of legacy EVTYPE spellings

Each stage returns a new DataFrame; the input is never modified.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Mapping, Optional

import pandas as pd

from .config import CUTOFF_DATE, LABEL_REWRITES, UNIT_MULTIPLIERS

logger = logging.getLogger(__name__)

DATE_FORMAT = "%m/%d/%Y"


# ---------------- Temporal filter ----------------
def parse_event_dates(dates: pd.Series) -> pd.Series:
    """Parse `M/D/YYYY[ H:MM:SS]` strings; anything unparseable becomes NaT."""
    day_part = dates.astype(str).str.strip().str.split(" ", n=1).str[0]
    return pd.to_datetime(day_part, format=DATE_FORMAT, errors="coerce")


def filter_by_date(df: pd.DataFrame, cutoff: date = CUTOFF_DATE, end: Optional[date] = None) -> pd.DataFrame:
    """Add EVENT_DATE and keep rows with cutoff <= EVENT_DATE (<= end).

    Rows whose date cannot be parsed never satisfy the comparison and are
    dropped.
    """
    out = df.assign(EVENT_DATE=parse_event_dates(df["BGN_DATE"]))
    unparsed = int(out["EVENT_DATE"].isna().sum())
    if unparsed:
        logger.info("%d rows have an unparseable BGN_DATE", unparsed)

    mask = out["EVENT_DATE"] >= pd.Timestamp(cutoff)
    if end is not None:
        mask &= out["EVENT_DATE"] <= pd.Timestamp(end)
    out = out[mask].reset_index(drop=True)
    logger.info("Date filter kept %d of %d rows (from %s)", len(out), len(df), cutoff)
    return out


# ---------------- Cost normalizer ----------------
def unit_multiplier(unit) -> float:
    """K/M/B -> 1e3/1e6/1e9. Anything else, lowercase included, -> 0."""
    if not isinstance(unit, str):
        return 0.0
    return UNIT_MULTIPLIERS.get(unit, 0.0)


def normalize_cost(magnitude: float, unit) -> float:
    return magnitude * unit_multiplier(unit)


def cost_column(magnitudes: pd.Series, units: pd.Series) -> pd.Series:
    """Vectorised `normalize_cost`; a missing magnitude counts as 0."""
    multipliers = units.map(unit_multiplier).astype(float)
    return magnitudes.fillna(0).astype(float) * multipliers


def add_cost_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Add PROPCOST, CROPCOST and TOTALCOST (absolute US$)."""
    out = df.assign(
        PROPCOST=cost_column(df["PROPDMG"], df["PROPDMGEXP"]),
        CROPCOST=cost_column(df["CROPDMG"], df["CROPDMGEXP"]),
    )
    out["TOTALCOST"] = out["PROPCOST"] + out["CROPCOST"]
    zeroed = int(((df["PROPDMG"].fillna(0) > 0) & (out["PROPCOST"] == 0)).sum())
    if zeroed:
        logger.debug("%d property magnitudes had an unrecognised unit and count as 0", zeroed)
    return out


# ---------------- Label normalizer ----------------
def normalize_label(label: str, rewrites: Mapping[str, str] = LABEL_REWRITES) -> str:
    """Exact-match rewrite; labels not in the table pass through."""
    return rewrites.get(label, label)


def normalize_labels(df: pd.DataFrame, rewrites: Mapping[str, str] = LABEL_REWRITES) -> pd.DataFrame:
    out = df.copy()
    out["EVTYPE"] = out["EVTYPE"].map(lambda v: normalize_label(v, rewrites))
    return out
