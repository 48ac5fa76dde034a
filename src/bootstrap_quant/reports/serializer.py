"""Save bootstrap results as JSON and Markdown.

A run is described by a plain ``dict`` payload (see :func:`build_payload`)
so the same structure feeds the CLI ``--json`` output, the Markdown report
and the files written by :func:`save_results`.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Mapping

from bootstrap_quant.engine.intervals import ConfidenceInterval
from bootstrap_quant.engine.summary import BootstrapResult

__all__ = ["build_payload", "generate_markdown", "save_results"]


def build_payload(
    result: BootstrapResult,
    intervals: Iterable[ConfidenceInterval] = (),
    *,
    metadata: Mapping[str, Any] | None = None,
    include_estimates: bool = False,
) -> dict[str, Any]:
    """Flatten a result and its intervals into a JSON-serialisable dict."""

    meta = {"timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds")}
    meta.update(metadata or {})
    return {
        "metadata": meta,
        "summary": result.to_dict(include_estimates=include_estimates),
        "intervals": [ci.to_dict() for ci in intervals],
    }


def _fmt(value: Any) -> str:
    if value is None:
        return "n/a"
    if isinstance(value, float):
        return f"{value:.6g}"
    return str(value)


def generate_markdown(payload: Mapping[str, Any]) -> str:
    """Human-readable Markdown report of a payload from :func:`build_payload`.

    Examples:
        >>> payload = {
        ...     "metadata": {"timestamp": "2025-10-28T12:00:00", "statistic": "mean"},
        ...     "summary": {"mean": 3.0, "standard_error": 0.6, "n_resamples": 1000},
        ...     "intervals": [],
        ... }
        >>> "# Bootstrap: mean" in generate_markdown(payload)
        True
    """
    metadata = payload.get("metadata", {})
    summary = payload.get("summary", {})
    title = metadata.get("statistic", "statistic")

    md = f"# Bootstrap: {title}\n\n"
    md += f"**Data:** {metadata.get('timestamp', 'unknown')}\n"
    for key in ("source", "n_obs", "backend", "workers", "seed"):
        if key in metadata and metadata[key] is not None:
            md += f"**{key}:** {_fmt(metadata[key])}\n"

    md += "\n## Resumo\n\n"
    md += "| mean | standard error | B |\n|---:|---:|---:|\n"
    md += (
        f"| {_fmt(summary.get('mean'))} | {_fmt(summary.get('standard_error'))} "
        f"| {summary.get('n_resamples')} |\n"
    )

    intervals = payload.get("intervals", [])
    if intervals:
        md += "\n## Intervalos de confiança\n\n"
        md += "| method | level | lower | upper |\n|---|---:|---:|---:|\n"
        for ci in intervals:
            md += (
                f"| {ci['method']} | {ci['level']:.0%} | {_fmt(ci['lower'])} "
                f"| {_fmt(ci['upper'])} |\n"
            )
    return md


def save_results(
    payload: Mapping[str, Any],
    output_dir: Path,
    *,
    create_symlink: bool = True,
) -> tuple[Path, Path]:
    """Write ``run_<timestamp>.json`` and ``.md`` under ``output_dir``.

    When ``create_symlink`` is set, ``latest_run.{json,md}`` point to the new
    files.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    timestamp = str(payload["metadata"]["timestamp"])
    timestamp_safe = timestamp.replace(":", "-").replace(".", "-").replace("+", "_")
    base_name = f"run_{timestamp_safe}"

    json_path = output_dir / f"{base_name}.json"
    json_path.write_text(
        json.dumps(payload, indent=2, sort_keys=True, allow_nan=False), encoding="utf-8"
    )

    md_path = output_dir / f"{base_name}.md"
    md_path.write_text(generate_markdown(payload), encoding="utf-8")

    if create_symlink:
        latest_json = output_dir / "latest_run.json"
        latest_md = output_dir / "latest_run.md"
        latest_json.unlink(missing_ok=True)
        latest_md.unlink(missing_ok=True)
        latest_json.symlink_to(json_path.name)
        latest_md.symlink_to(md_path.name)

    return json_path, md_path
