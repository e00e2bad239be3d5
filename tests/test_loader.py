import pandas as pd
import pytest

from stormimpact.config import COLUMNS
from stormimpact.loader import load_storm_csv, select_columns


def test_load_compressed_csv(storm_csv):
    df = load_storm_csv(storm_csv)
    assert len(df) == 5
    assert "REFNUM" in df.columns
    assert pd.api.types.is_numeric_dtype(df["FATALITIES"])
    assert pd.api.types.is_numeric_dtype(df["PROPDMG"])
    assert df["BGN_DATE"].iloc[0] == "4/18/1950 0:00:00"


def test_load_gzip(tmp_path, raw_frame):
    path = tmp_path / "storms.csv.gz"
    raw_frame.to_csv(path, index=False, compression="gzip")
    assert len(load_storm_csv(path)) == 5


def test_load_strips_header_whitespace(tmp_path):
    path = tmp_path / "storms.csv"
    path.write_text(" BGN_DATE ,EVTYPE\n1/1/1996 0:00:00,HAIL\n")
    df = load_storm_csv(path)
    assert list(df.columns) == ["BGN_DATE", "EVTYPE"]


def test_select_columns(raw_frame):
    out = select_columns(raw_frame)
    assert list(out.columns) == COLUMNS
    assert len(out) == len(raw_frame)
    assert "REFNUM" in raw_frame.columns


def test_select_columns_tolerates_header_variants():
    df = pd.DataFrame({
        "event_type": ["HAIL"],
        "bgn_date": ["1/1/1996"],
        "Fatalities": [0],
        "injuries": [1],
        "PROP_DMG": [1.0],
        "PROP_DMG_EXP": ["K"],
        "cropdmg": [0.0],
        "Crop Damage Exp": [""],
    })
    out = select_columns(df)
    assert list(out.columns) == COLUMNS
    assert out["EVTYPE"].iloc[0] == "HAIL"
    assert out["PROPDMGEXP"].iloc[0] == "K"


def test_select_columns_missing_column(raw_frame):
    with pytest.raises(KeyError, match="CROPDMGEXP"):
        select_columns(raw_frame.drop(columns=["CROPDMGEXP"]))
