"""Command line interface for the project.

Commands:
- show-settings: print the resolved :class:`Settings`
- run: load a sample, bootstrap a registered statistic and report the
  standard error and confidence intervals

Run options are resolved in layers: Settings defaults, then the YAML file
given with ``--config``, then explicit command-line flags.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterable

from bootstrap_quant.config import (
    BootstrapConfig,
    ConfigError,
    Settings,
    bind_run_context,
    configure_logging,
    get_settings,
    load_config,
)
from bootstrap_quant.config.constants import SUPPORTED_BACKENDS
from bootstrap_quant.data import load_sample
from bootstrap_quant.engine import (
    BootstrapError,
    interval,
    interval_analytic,
    replicate,
    replicate_parallel,
)
from bootstrap_quant.reports import build_payload, save_results
from bootstrap_quant.statistics import (
    STATISTICS,
    DegenerateSampleError,
    analytic_standard_error,
    get_statistic,
)

__all__ = ["build_parser", "resolve_run_config", "main"]

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="bootstrap_quant CLI")
    parser.add_argument(
        "--structured-logs",
        dest="structured_logs",
        action="store_true",
        help="força logs estruturados em JSON",
    )
    parser.add_argument(
        "--plain-logs",
        dest="structured_logs",
        action="store_false",
        help="força logs texto simples",
    )
    parser.set_defaults(structured_logs=None)

    subparsers = parser.add_subparsers(dest="command", required=True)

    show = subparsers.add_parser("show-settings", help="Exibe as Settings resolvidas")
    show.add_argument("--json", action="store_true", help="Formato JSON")

    run = subparsers.add_parser("run", help="Executa o bootstrap de uma estatística")
    run.add_argument("--config", type=str, help="Arquivo de configuração YAML")
    run.add_argument("--data", type=str, help="CSV/Parquet com as observações")
    run.add_argument("--column", type=str, help="Coluna com as observações")
    run.add_argument("--rf-column", type=str, help="Coluna pareada de taxa livre de risco")
    run.add_argument(
        "--statistic", choices=sorted(STATISTICS), help="Estatística registrada"
    )
    run.add_argument("--alpha", type=float, help="Probabilidade de cauda (var/es)")
    run.add_argument(
        "--periods-per-year", type=float, help="Fator de anualização (sharpe)"
    )
    run.add_argument(
        "-B", "--n-resamples", dest="n_resamples", type=int, help="Número de reamostragens"
    )
    run.add_argument("--level", type=float, help="Nível de confiança em (0, 1)")
    run.add_argument("--seed", type=int, help="Seed mestre")
    run.add_argument("--workers", type=int, help="Número de workers paralelos")
    run.add_argument("--backend", choices=SUPPORTED_BACKENDS, help="Backend paralelo")
    run.add_argument("--timeout", type=float, help="Prazo do run paralelo (segundos)")
    run.add_argument(
        "--sequential",
        dest="parallel",
        action="store_false",
        help="Usa o replicador sequencial",
    )
    run.add_argument(
        "--analytic",
        action="store_true",
        default=None,
        help="Inclui o intervalo analítico (normal) quando disponível",
    )
    run.add_argument("--output-dir", type=str, help="Salva JSON + Markdown neste diretório")
    run.add_argument("--plot", type=str, help="Salva o histograma das estimativas (PNG)")
    run.add_argument("--json", action="store_true", help="Mostra resultado em JSON")
    run.set_defaults(parallel=None)

    return parser


def _configure_logging(
    structured: bool | None, settings: Settings, command: str
) -> None:
    configure_logging(
        settings=settings, structured=structured, context={"command": command}
    )


def _print_payload(payload: dict[str, Any], *, as_json: bool) -> None:
    if as_json:
        print(json.dumps(payload, indent=2, sort_keys=True, allow_nan=False))
    else:
        for key, value in payload.items():
            print(f"{key}: {value}")


def resolve_run_config(args: argparse.Namespace, settings: Settings) -> BootstrapConfig:
    """Merge Settings defaults, the optional YAML file and CLI flags."""

    merged: dict[str, Any] = {
        "n_resamples": settings.n_resamples,
        "level": settings.confidence_level,
        "seed": settings.random_seed,
        "workers": settings.n_workers,
        "backend": settings.parallel_backend,
    }
    if args.config:
        from_file = load_config(args.config, BootstrapConfig, project_root=settings.project_root)
        merged.update(from_file.model_dump(exclude_unset=True))

    for key in ("n_resamples", "level", "seed", "workers", "backend", "timeout", "parallel", "analytic"):
        value = getattr(args, key, None)
        if value is not None:
            merged[key] = value

    data = dict(merged.get("data") or {})
    for key, flag in (("path", "data"), ("column", "column"), ("rf_column", "rf_column")):
        value = getattr(args, flag, None)
        if value is not None:
            data[key] = value
    if data:
        merged["data"] = data

    statistic = dict(merged.get("statistic") or {})
    params = dict(statistic.get("params") or {})
    if args.statistic is not None:
        if statistic.get("name") not in (None, args.statistic):
            params = {}
        statistic["name"] = args.statistic
    if args.alpha is not None:
        params["alpha"] = args.alpha
    if args.periods_per_year is not None:
        params["periods_per_year"] = args.periods_per_year
    statistic["params"] = params
    merged["statistic"] = statistic

    try:
        return BootstrapConfig.model_validate(merged)
    except ValueError as exc:
        raise ConfigError(f"Invalid run options:\n{exc}") from exc


def _resolve_data_path(raw: str, settings: Settings) -> Path:
    path = Path(raw).expanduser()
    if path.is_absolute() or path.exists():
        return path
    candidate = settings.data_dir / path
    return candidate if candidate.exists() else path


def _analytic_interval(name, sample, params, statistic, level: float):
    try:
        standard_error = analytic_standard_error(name, sample, **params)
    except DegenerateSampleError as exc:
        logger.warning("Analytic interval skipped for '%s': %s", name, exc)
        return None
    if standard_error is None:
        logger.warning("No closed-form standard error for '%s'; skipping analytic interval", name)
        return None
    return interval_analytic(statistic(sample), standard_error, level)


def _run(args: argparse.Namespace, settings: Settings) -> dict[str, Any]:
    config = resolve_run_config(args, settings)
    if config.data is None:
        raise ConfigError("No data source: pass --data or set data.path in --config")

    data_path = _resolve_data_path(config.data.path, settings)
    sample = load_sample(data_path, column=config.data.column, rf_column=config.data.rf_column)
    name = config.statistic.name
    params = config.statistic.params
    statistic = get_statistic(name, **params)
    bind_run_context(
        run=config.name,
        statistic=name,
        n_resamples=config.n_resamples,
        workers=config.workers if config.parallel else None,
        backend=config.backend if config.parallel else "sequential",
        seed=config.seed,
    )

    if config.parallel:
        result = replicate_parallel(
            sample,
            statistic,
            config.n_resamples,
            workers=config.workers,
            seed=config.seed,
            backend=config.backend,
            timeout=config.timeout,
        )
    else:
        result = replicate(sample, statistic, config.n_resamples, seed=config.seed)

    intervals = [interval(result.estimates, config.level)]
    if config.analytic:
        analytic = _analytic_interval(name, sample, params, statistic, config.level)
        if analytic is not None:
            intervals.append(analytic)

    payload = build_payload(
        result,
        intervals,
        metadata={
            "run": config.name,
            "statistic": name,
            "params": params,
            "source": str(data_path),
            "n_obs": int(sample.shape[0]),
            "parallel": config.parallel,
            "backend": config.backend if config.parallel else "sequential",
            "workers": config.workers,
            "seed": config.seed,
        },
    )

    if args.output_dir:
        json_path, md_path = save_results(payload, Path(args.output_dir))
        logger.info("Report saved to %s and %s", json_path, md_path)
    if args.plot:
        _save_plot(result, intervals, Path(args.plot), title=f"Bootstrap: {name}")
    return payload


def _save_plot(result, intervals, target: Path, *, title: str) -> None:
    import matplotlib.pyplot as plt

    from bootstrap_quant.reports.plots import plot_distribution

    ax = plot_distribution(result, intervals, title=title)
    target.parent.mkdir(parents=True, exist_ok=True)
    ax.figure.savefig(target, dpi=150, bbox_inches="tight")
    plt.close(ax.figure)
    logger.info("Distribution plot saved to %s", target)


def _flatten_for_text(payload: dict[str, Any]) -> dict[str, Any]:
    flat: dict[str, Any] = dict(payload["summary"])
    for ci in payload["intervals"]:
        flat[f"{ci['method']}_ci_{ci['level']:.0%}"] = f"[{ci['lower']:.6g}, {ci['upper']:.6g}]"
    if flat.get("standard_error") is None:
        flat["standard_error"] = "nan (B < 2)"
    return flat


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    settings = get_settings()
    _configure_logging(args.structured_logs, settings, args.command)

    try:
        if args.command == "show-settings":
            payload = settings.to_dict()
            _print_payload(payload, as_json=args.json)
        elif args.command == "run":
            payload = _run(args, settings)
            if args.json:
                _print_payload(payload, as_json=True)
            else:
                _print_payload(_flatten_for_text(payload), as_json=False)
        else:  # pragma: no cover
            parser.error(f"Unknown command: {args.command}")

    except (BootstrapError, ConfigError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
