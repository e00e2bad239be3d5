"""
Configuration: fixed constants and the run configuration.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Dict, Optional

# ---------------------------------------------------------------------------
# Source dataset
# ---------------------------------------------------------------------------
SOURCE_URL = "https://d396qusza40orc.cloudfront.net/repdata%2Fdata%2FStormData.csv.bz2"
DEFAULT_DATA_PATH = Path("data") / "StormData.csv.bz2"
DEFAULT_OUTPUT_DIR = Path("output")

# Columns kept from the raw file, in this order
COLUMNS = [
    "BGN_DATE",
    "EVTYPE",
    "FATALITIES",
    "INJURIES",
    "PROPDMG",
    "PROPDMGEXP",
    "CROPDMG",
    "CROPDMGEXP",
]

# NOAA began recording all event types in January 1996
CUTOFF_DATE = date(1996, 1, 1)

# ---------------------------------------------------------------------------
# Cleaning tables
# ---------------------------------------------------------------------------
# Case-sensitive; anything else (blank, lowercase, digits) counts as 0
UNIT_MULTIPLIERS: Dict[str, float] = {
    "K": 1e3,
    "M": 1e6,
    "B": 1e9,
}

LABEL_REWRITES: Dict[str, str] = {
    "TSTM WIND": "THUNDERSTORM WIND",
    "HURRICANE/TYPHOON": "HURRICANE (TYPHOON)",
    "WILD/FOREST FIRE": "WILDFIRE",
    "RIP CURRENTS": "RIP CURRENT",
}

# ---------------------------------------------------------------------------
# Aggregation / rendering
# ---------------------------------------------------------------------------
TOP_N = 25
MIN_FREQUENCY = 100

HEALTH_TITLE_TEMPLATE = "Population Impact of Storm Events By Type, {span}"
ECONOMIC_TITLE_TEMPLATE = "Economic Impact of Storm Events By Type, {span}"
DEFAULT_SPAN = "1996–2011"
HEALTH_TITLE = HEALTH_TITLE_TEMPLATE.format(span=DEFAULT_SPAN)
ECONOMIC_TITLE = ECONOMIC_TITLE_TEMPLATE.format(span=DEFAULT_SPAN)

FATALITIES_LABEL = "Total Fatalities"
INJURIES_LABEL = "Total Injuries"
HEALTH_COLORS: Dict[str, str] = {
    FATALITIES_LABEL: "firebrick",
    INJURIES_LABEL: "steelblue",
}
ECONOMIC_COLOR = "darkgreen"

HEALTH_CHART_FILE = "health_impact.png"
ECONOMIC_CHART_FILE = "economic_impact.png"


@dataclass
class PipelineConfig:
    """Everything one report run needs.

    Defaults reproduce the fixed report: full dataset from `SOURCE_URL`,
    events from 1996 onwards, top 25 categories per chart.
    """
    source_url: str = SOURCE_URL
    data_path: Path = DEFAULT_DATA_PATH
    output_dir: Path = DEFAULT_OUTPUT_DIR
    cutoff: date = CUTOFF_DATE
    # Inclusive upper bound; None keeps everything after the cutoff
    end: Optional[date] = None
    label_rewrites: Dict[str, str] = field(default_factory=lambda: dict(LABEL_REWRITES))
    top_n: int = TOP_N
    min_frequency: int = MIN_FREQUENCY
    force_download: bool = False
    render: bool = True
    export: bool = True
    docx_path: Optional[Path] = None

    def __post_init__(self) -> None:
        self.data_path = Path(self.data_path)
        self.output_dir = Path(self.output_dir)
        if self.docx_path is not None:
            self.docx_path = Path(self.docx_path)
        if self.top_n < 1:
            raise ValueError(f"top_n must be positive, got {self.top_n}")
        if self.end is not None and self.end < self.cutoff:
            raise ValueError(f"end date {self.end} is before cutoff {self.cutoff}")
