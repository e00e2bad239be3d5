import json
from datetime import date

import pandas as pd
import pytest

from stormimpact.config import PipelineConfig
from stormimpact.pipeline import build_report, clean, export_tables, render_charts, run_pipeline, year_span


@pytest.fixture
def config(tmp_path, storm_csv):
    return PipelineConfig(
        source_url="https://example.invalid/StormData.csv.bz2",
        data_path=storm_csv,
        output_dir=tmp_path / "out",
    )


def test_clean(raw_frame, config):
    df = clean(raw_frame, config)
    assert len(df) == 3
    assert (df["EVENT_DATE"] >= pd.Timestamp(1996, 1, 1)).all()
    assert set(df["EVTYPE"]) == {"THUNDERSTORM WIND", "TORNADO", "HURRICANE (TYPHOON)"}


def test_end_to_end_totals(raw_frame, config):
    report = build_report(raw_frame, config)

    health = report.health.set_index("EVTYPE")
    assert report.health["EVTYPE"].tolist() == ["TORNADO", "THUNDERSTORM WIND"]
    assert health.loc["TORNADO", "TOTAL_INJURIES"] == 20
    assert health.loc["TORNADO", "TOTAL_FATALITIES"] == 3
    assert health.loc["THUNDERSTORM WIND", "TOTAL_INJURIES"] == 5
    assert health.loc["THUNDERSTORM WIND", "TOTAL_FATALITIES"] == 2

    economic = report.economic.set_index("EVTYPE")
    assert report.economic["EVTYPE"].tolist() == ["TORNADO", "THUNDERSTORM WIND", "HURRICANE (TYPHOON)"]
    # 2B property; crops "k" is not a recognised unit
    assert economic.loc["TORNADO", "TOTAL_COST"] == 2e9
    assert economic.loc["THUNDERSTORM WIND", "PROPERTY_COST"] == 5000
    assert economic.loc["THUNDERSTORM WIND", "CROP_COST"] == 1.5e6
    assert economic.loc["THUNDERSTORM WIND", "TOTAL_COST"] == 1505000
    # property "m" is not recognised either
    assert economic.loc["HURRICANE (TYPHOON)", "PROPERTY_COST"] == 0
    assert economic.loc["HURRICANE (TYPHOON)", "TOTAL_COST"] == 10000

    assert report.frequency.empty


def test_end_date_narrows_window(raw_frame, config):
    config.end = date(2010, 12, 31)
    report = build_report(raw_frame, config)
    assert "TORNADO" not in report.health["EVTYPE"].tolist()


def test_export_tables(raw_frame, config):
    report = build_report(raw_frame, config)
    paths = export_tables(report)
    assert len(paths) == 6
    out = config.output_dir
    assert pd.read_csv(out / "health_impact.csv")["EVTYPE"].tolist() == ["TORNADO", "THUNDERSTORM WIND"]
    records = json.loads((out / "economic_impact.json").read_text())
    assert records[0]["EVTYPE"] == "TORNADO"
    assert records[0]["TOTAL_COST"] == 2e9


def test_run_pipeline_uses_local_file(config, monkeypatch):
    import stormimpact.acquire as acquire

    def no_network(*args, **kwargs):
        raise AssertionError("network used")

    monkeypatch.setattr(acquire.requests, "get", no_network)
    config.docx_path = config.output_dir / "report.docx"
    report = run_pipeline(config)

    assert len(report.chart_paths) == 2
    for path in report.chart_paths:
        with open(path, "rb") as f:
            assert f.read(8) == b"\x89PNG\r\n\x1a\n"
    assert (config.output_dir / "event_frequency.csv").exists()
    assert config.docx_path.exists()
    assert report.docx_path == str(config.docx_path)


def test_run_pipeline_without_outputs(config):
    config.render = False
    config.export = False
    report = run_pipeline(config)
    assert report.chart_paths == []
    assert report.export_paths == []
    assert not config.output_dir.exists()


def test_config_validation(tmp_path):
    with pytest.raises(ValueError):
        PipelineConfig(top_n=0)
    with pytest.raises(ValueError):
        PipelineConfig(end=date(1990, 1, 1))


def _chart_titles(monkeypatch):
    from stormimpact import report as report_module

    titles = []

    def keep_title(plt_, out_path):
        titles.append(plt_.gca().get_title())
        plt_.close()
        return str(out_path)

    monkeypatch.setattr(report_module, "_save", keep_title)
    return titles


def test_default_window_keeps_fixed_titles(raw_frame, config, monkeypatch):
    titles = _chart_titles(monkeypatch)
    report = build_report(raw_frame, config)
    assert year_span(report) == "1996–2011"
    render_charts(report)
    assert titles == [
        "Population Impact of Storm Events By Type, 1996–2011",
        "Economic Impact of Storm Events By Type, 1996–2011",
    ]


def test_custom_window_titles(raw_frame, config, monkeypatch):
    titles = _chart_titles(monkeypatch)
    config.cutoff = date(2011, 1, 1)
    config.end = date(2011, 12, 31)
    report = build_report(raw_frame, config)
    assert year_span(report) == "2011"
    render_charts(report)
    assert titles == [
        "Population Impact of Storm Events By Type, 2011",
        "Economic Impact of Storm Events By Type, 2011",
    ]
    assert all("1996" not in t for t in titles)


def test_year_span_uses_last_event_without_end(raw_frame, config):
    config.cutoff = date(2000, 1, 1)
    report = build_report(raw_frame, config)
    assert year_span(report) == "2000–2011"


def test_year_span_empty_window(raw_frame, config):
    config.cutoff = date(2020, 1, 1)
    report = build_report(raw_frame, config)
    assert report.cleaned.empty
    assert year_span(report) == "2020"
