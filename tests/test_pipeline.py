import json

import pandas as pd
import pytest

from cyclistic.pipeline import build_unified, export_summaries, main, prepare
from cyclistic.aggregate import build_summaries


def test_prepare_reports_schema_and_stats(current_raw):
    trips, schema, stats = prepare(current_raw)

    assert schema == "current"
    assert stats['rows_in'] == 5
    assert stats['rows_out'] == len(trips) == 3


def test_build_unified(legacy_raw, current_raw):
    unified, stats = build_unified(legacy_raw, current_raw)

    assert len(unified) == stats['rows_unified'] == 6
    assert stats['legacy']['schema'] == "legacy"
    assert stats['current']['schema'] == "current"
    # legacy rows first
    assert unified["ride_id"].tolist()[:3] == ["21742443", "21742446", "21742447"]

    assert unified["trip_duration"].gt(60).all()
    assert unified["start_station_name"].notna().all()
    assert unified["end_station_name"].notna().all()


def test_build_unified_leaves_inputs_alone(legacy_raw, current_raw):
    legacy_before, current_before = legacy_raw.copy(), current_raw.copy()
    build_unified(legacy_raw, current_raw)
    pd.testing.assert_frame_equal(legacy_raw, legacy_before)
    pd.testing.assert_frame_equal(current_raw, current_before)


@pytest.mark.parametrize("fmt", ["csv", "parquet"])
def test_export_summaries(tmp_path, unified, fmt):
    written = export_summaries(build_summaries(unified), tmp_path / "out", fmt)

    assert len(written) == 8
    assert all(p.exists() and p.suffix == f".{fmt}" for p in written)


def test_export_rejects_unknown_format(tmp_path, unified):
    with pytest.raises(ValueError):
        export_summaries(build_summaries(unified), tmp_path, "xml")


def test_main_end_to_end(tmp_path, legacy_raw, current_raw, capsys, write_csv):
    legacy = write_csv(legacy_raw, tmp_path / "Divvy_Trips_2019_Q1.csv")
    current = write_csv(current_raw, tmp_path / "Divvy_Trips_2020_Q1.csv")
    out_dir, logs_dir = tmp_path / "processed", tmp_path / "logs"

    status = main([
        "--legacy", str(legacy),
        "--current", str(current),
        "--output-dir", str(out_dir),
        "--logs-dir", str(logs_dir),
    ])

    assert status == 0
    totals = pd.read_csv(out_dir / "total_rides_by_rider_type.csv")
    assert totals["total_rides"].sum() == 6

    logs = list(logs_dir.glob("pipeline_run_*.json"))
    assert len(logs) == 1
    log = json.loads(logs[0].read_text())
    assert log['rows_unified'] == 6
    assert log['noncanonical_rider_rows'] == 1
    assert log['noncanonical_rider_types'] == {"Student": 1}

    output = capsys.readouterr().out
    assert "non-canonical rider type" in output


def test_main_missing_input(tmp_path, current_raw, capsys, write_csv):
    current = write_csv(current_raw, tmp_path / "trips_2020.csv")

    status = main([
        "--legacy", str(tmp_path / "missing.csv"),
        "--current", str(current),
        "--logs-dir", str(tmp_path / "logs"),
        "--no-export",
    ])

    assert status == 1
    assert "✗" in capsys.readouterr().out
    assert not (tmp_path / "logs").exists()


def test_build_unified_prints_nothing(current_raw, capsys):
    build_unified(current_raw, current_raw)
    assert capsys.readouterr().out == ""


def test_main_warns_when_both_inputs_share_a_schema(tmp_path, current_raw, capsys, write_csv):
    current = write_csv(current_raw, tmp_path / "trips_2020.csv")

    status = main([
        "--legacy", str(current),
        "--current", str(current),
        "--logs-dir", str(tmp_path / "logs"),
        "--no-export",
    ])

    assert status == 0
    assert "Both inputs use the current schema" in capsys.readouterr().out


def test_main_export_failure(tmp_path, legacy_raw, current_raw, capsys, write_csv):
    legacy = write_csv(legacy_raw, tmp_path / "trips_2019.csv")
    current = write_csv(current_raw, tmp_path / "trips_2020.csv")
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("")
    logs_dir = tmp_path / "logs"

    status = main([
        "--legacy", str(legacy),
        "--current", str(current),
        "--output-dir", str(blocker / "processed"),
        "--logs-dir", str(logs_dir),
    ])

    assert status == 1
    assert "✗ Export failed" in capsys.readouterr().out
    log = json.loads(next(logs_dir.glob("pipeline_run_*.json")).read_text())
    assert log['export_error']
    assert log['summaries_written'] == []
