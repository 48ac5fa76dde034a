"""Logging dos runs de bootstrap.

Todo registro que passa pelos *handlers* do root recebe os campos do run em
andamento (``run``, ``statistic``, ``n_resamples``, ``workers``, ``backend``,
``seed``) via :class:`RunContextFilter`. O CLI instala a configuração com
:func:`configure_logging` e, assim que a configuração do run é resolvida,
publica esses campos com :func:`bind_run_context`.

- texto simples: ``... | mensagem | run=sharpe_daily B=5000 workers=3``
- estruturado: um objeto JSON por linha, campos do run como chaves.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any, Mapping

import numpy as np

from .settings import Settings, get_settings

__all__ = [
    "RUN_FIELDS",
    "JSONFormatter",
    "RunContextFilter",
    "RunFormatter",
    "bind_run_context",
    "configure_logging",
]

RUN_FIELDS = ("run", "statistic", "n_resamples", "workers", "backend", "seed")
"""Campos do run estampados em cada registro, na ordem em que são exibidos."""

_SHORT_LABELS = {"n_resamples": "B"}

_RESERVED = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
}


def _json_default(value: Any) -> Any:
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return _finite_or_none(float(value))
    if isinstance(value, np.ndarray):
        return f"<ndarray shape={value.shape}>"
    return str(value)


def _finite_or_none(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


class RunContextFilter(logging.Filter):
    """Stamps the current run fields onto records that do not carry them."""

    def __init__(self, context: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self.context: dict[str, Any] = {}
        self.update(context or {})

    def update(self, fields: Mapping[str, Any]) -> None:
        for key, value in fields.items():
            if value is None:
                self.context.pop(key, None)
            else:
                self.context[key] = value

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.context.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class RunFormatter(logging.Formatter):
    """Plain-text formatter that appends the run fields present on the record."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = [
            f"{_SHORT_LABELS.get(key, key)}={getattr(record, key)}"
            for key in RUN_FIELDS
            if getattr(record, key, None) is not None
        ]
        if fields:
            line = f"{line} | {' '.join(fields)}"
        return line


class JSONFormatter(logging.Formatter):
    """Formatador que serializa ``LogRecord`` em JSON."""

    def __init__(self, *, default_context: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self._default_context = dict(default_context or {})

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        payload.update(self._default_context)

        for key, value in record.__dict__.items():
            if key in _RESERVED:
                continue
            payload.setdefault(key, _finite_or_none(value))

        return json.dumps(payload, ensure_ascii=False, default=_json_default)


def bind_run_context(**fields: Any) -> None:
    """Publish run fields on every handler installed by :func:`configure_logging`.

    ``None`` removes a field (e.g. ``workers=None`` when the default is used).
    """

    for handler in logging.getLogger().handlers:
        for flt in handler.filters:
            if isinstance(flt, RunContextFilter):
                flt.update(fields)


def configure_logging(
    *,
    settings: Settings | None = None,
    level: int | str = logging.INFO,
    structured: bool | None = None,
    stream: IO[str] | None = None,
    context: Mapping[str, Any] | None = None,
    log_file: Path | None = None,
) -> None:
    """Configure the root logger for a bootstrap session.

    Parameters
    ----------
    settings:
        Instância de :class:`Settings`; ``None`` usa :func:`get_settings`.
    level:
        Nível dos *handlers*.
    structured:
        ``True`` usa :class:`JSONFormatter`; ``None`` segue
        ``settings.structured_logging``.
    stream:
        Alvo do ``StreamHandler``; por padrão ``sys.stderr``.
    context:
        Campos fixos da sessão (ex.: ``{"command": "run"}``). Campos de
        :data:`RUN_FIELDS` aqui já entram no filtro do run.
    log_file:
        Arquivo de log (append); por padrão ``settings.logs_dir / 'bootstrap_quant.log'``.
    """

    settings = settings or get_settings()
    structured = settings.structured_logging if structured is None else structured
    context = dict(context or {})
    run_fields = {key: context.pop(key) for key in RUN_FIELDS if key in context}

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.DEBUG)

    formatter: logging.Formatter
    if structured:
        formatter = JSONFormatter(default_context=context)
    else:
        formatter = RunFormatter()
    run_filter = RunContextFilter(run_fields)

    handlers: list[logging.Handler] = [logging.StreamHandler(stream)]
    file_target = log_file or (settings.logs_dir / "bootstrap_quant.log")
    try:
        file_target.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(file_target, encoding="utf-8"))
    except OSError:  # pragma: no cover - read-only filesystems
        root_logger.warning("Could not open log file %s; logging to stream only", file_target)

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(run_filter)
        root_logger.addHandler(handler)
