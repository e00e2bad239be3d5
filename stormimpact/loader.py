"""
Dataset loader (compressed CSV -> DataFrame)
============================================

This module reads the Storm Events export and keeps only the columns the
report needs.

Key ideas:
- pandas infers the compression (.bz2/.gz/.zip) from the file name.
- Column names are matched exactly first, then case/punctuation-insensitively,
  because re-exports of the dataset do not always keep the original headers.
- The loader never edits the file on disk.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Sequence, Union

import pandas as pd

from .config import COLUMNS

logger = logging.getLogger(__name__)

# Alternative headers seen in other exports of the same data
_ALIASES: Dict[str, Sequence[str]] = {
    "BGN_DATE": ("BEGIN_DATE", "Begin Date"),
    "EVTYPE": ("EVENT_TYPE", "Event Type"),
    "FATALITIES": ("DEATHS", "Fatalities"),
    "INJURIES": ("Injuries",),
    "PROPDMG": ("PROP_DMG", "Property Damage"),
    "PROPDMGEXP": ("PROP_DMG_EXP", "Property Damage Exp"),
    "CROPDMG": ("CROP_DMG", "Crop Damage"),
    "CROPDMGEXP": ("CROP_DMG_EXP", "Crop Damage Exp"),
}


def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())


def _col(df: pd.DataFrame, *names: str) -> str:
    cols = list(df.columns)
    for n in names:
        if n in cols:
            return n
    norm_map = {_norm(c): c for c in cols}
    for n in names:
        nn = _norm(n)
        if nn in norm_map:
            return norm_map[nn]
    raise KeyError(f"Missing required column. Tried={names}. Available={cols}")


def load_storm_csv(path: Union[str, Path]) -> pd.DataFrame:
    """Parse the (compressed) CSV into a DataFrame.

    Types are whatever pandas infers: counts and magnitudes come back
    numeric, dates and unit suffixes as text.
    """
    df = pd.read_csv(path, compression="infer", low_memory=False)
    df.rename(columns={c: str(c).strip() for c in df.columns}, inplace=True)
    logger.info("Loaded %d rows x %d columns from %s", len(df), len(df.columns), path)
    return df


def select_columns(df: pd.DataFrame, columns: Sequence[str] = COLUMNS) -> pd.DataFrame:
    """Keep exactly `columns` (renamed to those names); rows are untouched."""
    resolved = {}
    for name in columns:
        resolved[_col(df, name, *_ALIASES.get(name, ()))] = name
    out = df[list(resolved)].rename(columns=resolved).copy()
    logger.debug("Projected to columns %s", list(out.columns))
    return out
