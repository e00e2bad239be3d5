"""
Aggregations
============

Summary tables built from the cleaned table, all keyed by the normalised
EVTYPE label:

- health_impact:   fatalities/injuries per event type
- economic_impact: property/crop/total cost per event type
- event_frequency: how often casualty-causing events occur per type

Every sort ends with EVTYPE ascending so ties always come out in the same
order.
"""

from __future__ import annotations

import logging
from typing import List

import pandas as pd

from .config import FATALITIES_LABEL, INJURIES_LABEL, MIN_FREQUENCY, TOP_N
from .models import EconomicImpact, EventFrequency, HealthImpact

logger = logging.getLogger(__name__)


def _casualty_rows(df: pd.DataFrame) -> pd.DataFrame:
    return df[(df["FATALITIES"] > 0) | (df["INJURIES"] > 0)]


def health_impact(df: pd.DataFrame) -> pd.DataFrame:
    """Columns: EVTYPE, TOTAL_FATALITIES, TOTAL_INJURIES.

    Sorted by injuries desc, fatalities desc, EVTYPE asc.
    """
    out = (
        _casualty_rows(df)
        .groupby("EVTYPE", as_index=False)
        .agg(TOTAL_FATALITIES=("FATALITIES", "sum"), TOTAL_INJURIES=("INJURIES", "sum"))
        .sort_values(
            ["TOTAL_INJURIES", "TOTAL_FATALITIES", "EVTYPE"],
            ascending=[False, False, True],
            kind="mergesort",
        )
        .reset_index(drop=True)
    )
    logger.info("Health impact: %d event types", len(out))
    return out


def economic_impact(df: pd.DataFrame) -> pd.DataFrame:
    """Columns: EVTYPE, PROPERTY_COST, CROP_COST, TOTAL_COST.

    Rows with no property and no crop cost are left out. Sorted by total
    cost desc, EVTYPE asc.
    """
    damaged = df[(df["PROPCOST"] > 0) | (df["CROPCOST"] > 0)]
    out = damaged.groupby("EVTYPE", as_index=False).agg(
        PROPERTY_COST=("PROPCOST", "sum"), CROP_COST=("CROPCOST", "sum")
    )
    out["TOTAL_COST"] = out["PROPERTY_COST"] + out["CROP_COST"]
    out = out.sort_values(
        ["TOTAL_COST", "EVTYPE"], ascending=[False, True], kind="mergesort"
    ).reset_index(drop=True)
    logger.info("Economic impact: %d event types", len(out))
    return out


def event_frequency(df: pd.DataFrame, min_count: int = MIN_FREQUENCY) -> pd.DataFrame:
    """Columns: EVTYPE, EVENT_COUNT, TOTAL_CASUALTIES.

    Counts casualty-causing rows per type, keeps types with at least
    `min_count` rows, most frequent first.
    """
    hit = _casualty_rows(df).assign(CASUALTIES=lambda d: d["INJURIES"] + d["FATALITIES"])
    out = hit.groupby("EVTYPE", as_index=False).agg(
        EVENT_COUNT=("CASUALTIES", "size"), TOTAL_CASUALTIES=("CASUALTIES", "sum")
    )
    out = out[out["EVENT_COUNT"] >= min_count]
    out = out.sort_values(
        ["EVENT_COUNT", "EVTYPE"], ascending=[False, True], kind="mergesort"
    ).reset_index(drop=True)
    logger.info("Event frequency: %d event types with >= %d events", len(out), min_count)
    return out


def health_long(health: pd.DataFrame, top_n: int = TOP_N) -> pd.DataFrame:
    """Reshape the top `top_n` health rows to two rows per event type.

    Columns: EVTYPE, IMPACT_TYPE ("Total Fatalities"/"Total Injuries"),
    IMPACT_COUNT. Event types keep their ranking order.
    """
    top = health.head(top_n).rename(
        columns={"TOTAL_FATALITIES": FATALITIES_LABEL, "TOTAL_INJURIES": INJURIES_LABEL}
    )
    long = top.reset_index().melt(
        id_vars=["index", "EVTYPE"],
        value_vars=[FATALITIES_LABEL, INJURIES_LABEL],
        var_name="IMPACT_TYPE",
        value_name="IMPACT_COUNT",
    )
    order = pd.Categorical(long["IMPACT_TYPE"], categories=[FATALITIES_LABEL, INJURIES_LABEL], ordered=True)
    long = long.assign(_ORDER=order.codes).sort_values(["index", "_ORDER"], kind="mergesort")
    return long.drop(columns=["index", "_ORDER"]).reset_index(drop=True)


# ---------------- Typed views ----------------
def health_records(health: pd.DataFrame) -> List[HealthImpact]:
    return [
        HealthImpact(event_type=str(r.EVTYPE), fatalities=int(r.TOTAL_FATALITIES), injuries=int(r.TOTAL_INJURIES))
        for r in health.itertuples(index=False)
    ]


def economic_records(economic: pd.DataFrame) -> List[EconomicImpact]:
    return [
        EconomicImpact(
            event_type=str(r.EVTYPE),
            property_cost=float(r.PROPERTY_COST),
            crop_cost=float(r.CROP_COST),
            total_cost=float(r.TOTAL_COST),
        )
        for r in economic.itertuples(index=False)
    ]


def frequency_records(frequency: pd.DataFrame) -> List[EventFrequency]:
    return [
        EventFrequency(event_type=str(r.EVTYPE), event_count=int(r.EVENT_COUNT), casualties=int(r.TOTAL_CASUALTIES))
        for r in frequency.itertuples(index=False)
    ]
