from __future__ import annotations

import json

import numpy as np

from bootstrap_quant.engine import interval, interval_analytic
from bootstrap_quant.engine.summary import summarize
from bootstrap_quant.reports import build_payload, generate_markdown, save_results


def _payload(**kwargs):
    result = summarize(np.linspace(2.0, 4.0, 201))
    intervals = [interval(result.estimates, 0.95), interval_analytic(3.0, 0.5, 0.95)]
    return build_payload(
        result,
        intervals,
        metadata={"statistic": "mean", "source": "returns.csv", "seed": 42, "workers": None},
        **kwargs,
    )


def test_build_payload_structure():
    payload = _payload()

    assert payload["metadata"]["statistic"] == "mean"
    assert "timestamp" in payload["metadata"]
    assert payload["summary"]["n_resamples"] == 201
    assert "estimates" not in payload["summary"]
    assert [ci["method"] for ci in payload["intervals"]] == ["percentile", "analytic"]
    json.dumps(payload)


def test_build_payload_can_include_estimates():
    payload = _payload(include_estimates=True)

    assert len(payload["summary"]["estimates"]) == 201


def test_generate_markdown_renders_tables():
    md = generate_markdown(_payload())

    assert md.startswith("# Bootstrap: mean")
    assert "**source:** returns.csv" in md
    assert "**workers:**" not in md
    assert "## Resumo" in md
    assert "| percentile | 95% |" in md
    assert "| analytic | 95% |" in md


def test_save_results_writes_files_and_symlinks(tmp_path):
    payload = _payload()

    json_path, md_path = save_results(payload, tmp_path / "reports")

    assert json_path.exists() and md_path.exists()
    assert json.loads(json_path.read_text(encoding="utf-8"))["summary"]["n_resamples"] == 201
    latest = tmp_path / "reports" / "latest_run.json"
    assert latest.is_symlink()
    assert latest.resolve() == json_path.resolve()

    save_results(payload, tmp_path / "reports")
    assert (tmp_path / "reports" / "latest_run.md").is_symlink()


def test_save_results_without_symlink(tmp_path):
    save_results(_payload(), tmp_path, create_symlink=False)

    assert not (tmp_path / "latest_run.json").exists()


def test_save_results_single_resample_is_strict_json(tmp_path):
    result = summarize([0.7])
    payload = build_payload(result, [interval(result.estimates, 0.9)], metadata={"seed": 1})

    json_path, md_path = save_results(payload, tmp_path, create_symlink=False)

    text = json_path.read_text(encoding="utf-8")
    assert "NaN" not in text
    assert json.loads(text)["summary"]["standard_error"] is None
    assert "| 0.7 | n/a | 1 |" in md_path.read_text(encoding="utf-8")
