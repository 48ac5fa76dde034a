from __future__ import annotations

import json
import logging

import matplotlib

matplotlib.use("Agg")

import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402
import pytest  # noqa: E402
import yaml  # noqa: E402

from bootstrap_quant import cli  # noqa: E402
from bootstrap_quant.config import ConfigError, Settings  # noqa: E402


def _cleanup_logging() -> None:
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)


def teardown_function() -> None:  # pragma: no cover - cleanup helper
    _cleanup_logging()


@pytest.fixture(autouse=True)
def isolated_root(monkeypatch, tmp_path):
    monkeypatch.setenv("BOOTSTRAP_QUANT_PROJECT_ROOT", str(tmp_path))
    return tmp_path


@pytest.fixture
def returns_csv(tmp_path):
    rng = np.random.default_rng(5)
    frame = pd.DataFrame(
        {
            "portfolio": rng.normal(0.0005, 0.01, size=120),
            "rf": np.full(120, 0.0001),
        },
        index=pd.date_range("2024-01-01", periods=120, freq="B"),
    )
    path = tmp_path / "returns.csv"
    frame.to_csv(path)
    return path


def test_show_settings_json(monkeypatch, capsys, tmp_path):
    monkeypatch.setenv("BOOTSTRAP_QUANT_N_RESAMPLES", "321")
    monkeypatch.setenv("BOOTSTRAP_QUANT_PARALLEL_BACKEND", "thread")

    exit_code = cli.main(["show-settings", "--json"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["n_resamples"] == 321
    assert payload["parallel_backend"] == "thread"
    assert payload["project_root"] == str(tmp_path.resolve())


def test_run_json_with_analytic_interval(capsys, returns_csv):
    exit_code = cli.main(
        [
            "run",
            "--data",
            str(returns_csv),
            "--column",
            "portfolio",
            "--statistic",
            "mean",
            "-B",
            "200",
            "--level",
            "0.9",
            "--seed",
            "3",
            "--workers",
            "2",
            "--backend",
            "thread",
            "--analytic",
            "--json",
        ]
    )

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["summary"]["n_resamples"] == 200
    assert payload["metadata"]["backend"] == "thread"
    assert payload["metadata"]["n_obs"] == 120
    assert [ci["method"] for ci in payload["intervals"]] == ["percentile", "analytic"]
    assert all(ci["level"] == 0.9 for ci in payload["intervals"])


def test_run_sequential_is_reproducible(capsys, returns_csv):
    argv = [
        "run",
        "--data",
        str(returns_csv),
        "--column",
        "portfolio",
        "--rf-column",
        "rf",
        "--statistic",
        "sharpe",
        "-B",
        "100",
        "--seed",
        "9",
        "--sequential",
        "--json",
    ]

    assert cli.main(argv) == 0
    first = json.loads(capsys.readouterr().out)
    assert cli.main(argv) == 0
    second = json.loads(capsys.readouterr().out)

    assert first["metadata"]["backend"] == "sequential"
    assert first["summary"] == second["summary"]


def test_run_text_output(capsys, returns_csv):
    exit_code = cli.main(
        [
            "run",
            "--data",
            str(returns_csv),
            "--column",
            "portfolio",
            "-B",
            "50",
            "--backend",
            "sequential",
            "--workers",
            "2",
        ]
    )

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "mean:" in out
    assert "percentile_ci_95%:" in out


def test_run_writes_reports_and_plot(returns_csv, tmp_path):
    output_dir = tmp_path / "out"
    plot_path = tmp_path / "plots" / "dist.png"

    exit_code = cli.main(
        [
            "run",
            "--data",
            str(returns_csv),
            "--column",
            "portfolio",
            "--statistic",
            "var",
            "--alpha",
            "0.1",
            "-B",
            "60",
            "--sequential",
            "--output-dir",
            str(output_dir),
            "--plot",
            str(plot_path),
        ]
    )

    assert exit_code == 0
    assert (output_dir / "latest_run.json").exists()
    assert plot_path.exists()
    saved = json.loads((output_dir / "latest_run.json").read_text(encoding="utf-8"))
    assert saved["metadata"]["params"] == {"alpha": 0.1}


def test_run_from_yaml_with_cli_override(capsys, returns_csv, tmp_path):
    config_path = tmp_path / "run.yaml"
    config_path.write_text(
        yaml.safe_dump(
            {
                "name": "yaml_run",
                "data": {"path": str(returns_csv), "column": "portfolio"},
                "statistic": {"name": "var", "params": {"alpha": 0.01}},
                "n_resamples": 40,
                "backend": "sequential",
                "workers": 2,
            }
        ),
        encoding="utf-8",
    )

    exit_code = cli.main(["run", "--config", str(config_path), "-B", "30", "--json"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["metadata"]["run"] == "yaml_run"
    assert payload["metadata"]["statistic"] == "var"
    assert payload["metadata"]["params"] == {"alpha": 0.01}
    assert payload["summary"]["n_resamples"] == 30


def test_resolve_run_config_layers(tmp_path):
    settings = Settings.from_env(
        overrides={"project_root": tmp_path, "N_RESAMPLES": 77, "PARALLEL_BACKEND": "thread"},
        environ={},
    )
    config_path = tmp_path / "run.yaml"
    config_path.write_text(
        "statistic:\n  name: var\n  params:\n    alpha: 0.01\nlevel: 0.8\n", encoding="utf-8"
    )
    args = cli.build_parser().parse_args(
        ["run", "--config", str(config_path), "--statistic", "es", "--alpha", "0.2"]
    )

    config = cli.resolve_run_config(args, settings)

    assert config.n_resamples == 77
    assert config.backend == "thread"
    assert config.level == pytest.approx(0.8)
    assert config.statistic.name == "es"
    assert config.statistic.params == {"alpha": 0.2}
    assert config.parallel is True


def test_resolve_run_config_rejects_invalid_flags(tmp_path):
    settings = Settings.from_env(overrides={"project_root": tmp_path}, environ={})
    args = cli.build_parser().parse_args(["run", "--level", "1.5"])

    with pytest.raises(ConfigError, match="Invalid run options"):
        cli.resolve_run_config(args, settings)


def test_run_without_data_fails(capsys):
    exit_code = cli.main(["run", "-B", "10"])

    assert exit_code == 1
    assert "No data source" in capsys.readouterr().err


def test_statistic_failure_exits_with_error(capsys, tmp_path):
    path = tmp_path / "flat.csv"
    pd.DataFrame({"r": np.full(20, -0.01)}).to_csv(path)

    exit_code = cli.main(
        ["run", "--data", str(path), "--statistic", "es", "-B", "10", "--sequential"]
    )

    assert exit_code == 1
    assert "Error:" in capsys.readouterr().err


def test_missing_data_file_exits_with_code_two(capsys, tmp_path):
    exit_code = cli.main(["run", "--data", str(tmp_path / "nope.csv"), "--sequential"])

    assert exit_code == 2
    assert "nope.csv" in capsys.readouterr().err


def test_analytic_interval_skipped_for_single_observation(capsys, tmp_path):
    path = tmp_path / "one_row.csv"
    pd.DataFrame({"r": [0.012]}, index=pd.date_range("2024-01-01", periods=1)).to_csv(path)

    exit_code = cli.main(
        [
            "run",
            "--data",
            str(path),
            "--statistic",
            "mean",
            "-B",
            "5",
            "--analytic",
            "--sequential",
            "--json",
        ]
    )

    captured = capsys.readouterr()
    assert exit_code == 0
    payload = json.loads(captured.out)
    assert [ci["method"] for ci in payload["intervals"]] == ["percentile"]
    assert "Analytic interval skipped" in captured.err


def test_unsupported_data_format_exits_with_error(capsys, tmp_path):
    path = tmp_path / "returns.txt"
    path.write_text("0.01\n0.02\n", encoding="utf-8")

    exit_code = cli.main(["run", "--data", str(path), "--sequential"])

    assert exit_code == 1
    assert "Error: Unsupported data format" in capsys.readouterr().err


def test_single_resample_prints_strict_json(capsys, returns_csv):
    exit_code = cli.main(
        [
            "run",
            "--data",
            str(returns_csv),
            "--column",
            "portfolio",
            "-B",
            "1",
            "--sequential",
            "--json",
        ]
    )

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "NaN" not in out
    assert json.loads(out)["summary"]["standard_error"] is None


def test_single_resample_text_output(capsys, returns_csv):
    exit_code = cli.main(
        ["run", "--data", str(returns_csv), "--column", "portfolio", "-B", "1", "--sequential"]
    )

    assert exit_code == 0
    assert "standard_error: nan (B < 2)" in capsys.readouterr().out


def test_structured_logs_carry_run_context(capsys, returns_csv):
    exit_code = cli.main(
        [
            "--structured-logs",
            "run",
            "--data",
            str(returns_csv),
            "--column",
            "portfolio",
            "--statistic",
            "mean",
            "-B",
            "40",
            "--seed",
            "11",
            "--workers",
            "2",
            "--backend",
            "thread",
            "--json",
        ]
    )

    assert exit_code == 0
    records = [
        json.loads(line)
        for line in capsys.readouterr().err.splitlines()
        if line.startswith("{")
    ]
    started = next(r for r in records if r["message"].startswith("Parallel bootstrap"))
    assert started["command"] == "run"
    assert started["statistic"] == "mean"
    assert started["n_resamples"] == 40
    assert started["workers"] == 2
    assert started["backend"] == "thread"
    assert started["seed"] == 11
