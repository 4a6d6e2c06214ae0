from swingmetrics import cli


def test_record_writes_csv_for_duration(tmp_path, capsys) -> None:
    out = tmp_path / "session.csv"
    code = cli.main(["record", "--duration", "0.3", "--interval-ms", "10", "--out", str(out), "--seed", "1"])

    assert code == 0
    assert out.exists()
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines
    assert all(len(line.split(", ")) == 7 for line in lines)
    assert "Wrote" in capsys.readouterr().out


def test_record_without_gyro_refuses_by_default(tmp_path, capsys) -> None:
    out = tmp_path / "session.csv"
    code = cli.main(["record", "--duration", "0.05", "--no-gyro", "--out", str(out)])

    assert code == 1
    assert not out.exists()
    assert "gyroscope" in capsys.readouterr().err


def test_record_without_gyro_partial_capture(tmp_path) -> None:
    out = tmp_path / "accel_only.csv"
    code = cli.main(
        ["record", "--duration", "0.2", "--interval-ms", "10", "--no-gyro", "--allow-partial", "--out", str(out)]
    )
    assert code == 0
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines
    # gyroscope columns stay at their default value
    assert lines[0].endswith("0.000000, 0.000000, 0.000000")


def test_config_file_values_are_overridden_by_flags(tmp_path) -> None:
    cfg_path = tmp_path / "recorder.yaml"
    cfg_path.write_text("recorder:\n  capacity: 10\n  interval_ms: 40\n", encoding="utf-8")
    args = cli.build_parser().parse_args(["record", "--config", str(cfg_path), "--interval-ms", "25"])

    cfg = cli.resolve_config(args)

    assert cfg.capacity == 10
    assert cfg.interval_ms == 25


def test_inspect_reports_rows_and_duration(tmp_path, capsys) -> None:
    path = tmp_path / "data.csv"
    path.write_text(
        "0.000000, 1.000000, 2.000000, 3.000000, 4.000000, 5.000000, 6.000000\n"
        "0.050000, 1.000000, 2.000000, 3.000000, 4.000000, 5.000000, 6.000000\n"
        "0.100000, 1.000000, 2.000000, 3.000000, 4.000000, 5.000000, 6.000000\n",
        encoding="utf-8",
    )
    assert cli.main(["inspect", str(path)]) == 0
    assert "3 rows, 0.100 s" in capsys.readouterr().out


def test_inspect_missing_file(tmp_path) -> None:
    assert cli.main(["inspect", str(tmp_path / "missing.csv")]) == 1
