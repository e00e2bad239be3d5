import os

os.environ.setdefault("MPLBACKEND", "Agg")

import pandas as pd
import pytest


def make_raw(rows):
    """Build a raw StormData-shaped frame; extra columns mimic the real file."""
    df = pd.DataFrame(
        rows,
        columns=["BGN_DATE", "EVTYPE", "FATALITIES", "INJURIES",
                 "PROPDMG", "PROPDMGEXP", "CROPDMG", "CROPDMGEXP"],
    )
    df.insert(0, "STATE__", 1.0)
    df["REFNUM"] = range(1, len(df) + 1)
    return df


@pytest.fixture
def raw_rows():
    # Two rows before the cutoff; three after with mixed unit suffixes
    return [
        ("4/18/1950 0:00:00", "TORNADO", 4, 15, 25.0, "K", 0.0, None),
        ("12/31/1995 0:00:00", "TSTM WIND", 1, 2, 10.0, "M", 0.0, None),
        ("1/1/1996 0:00:00", "TSTM WIND", 2, 5, 5.0, "K", 1.5, "M"),
        ("6/15/2011 0:00:00", "TORNADO", 3, 20, 2.0, "B", 0.0, "k"),
        ("8/29/2005 0:00:00", "HURRICANE/TYPHOON", 0, 0, 3.0, "m", 10.0, "K"),
    ]


@pytest.fixture
def raw_frame(raw_rows):
    return make_raw(raw_rows)


@pytest.fixture
def storm_csv(tmp_path, raw_frame):
    path = tmp_path / "StormData.csv.bz2"
    raw_frame.to_csv(path, index=False, compression="bz2")
    return path
