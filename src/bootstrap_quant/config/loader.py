"""Configuration loading and validation utilities.

Loads YAML run configurations and validates them against Pydantic schemas,
handling file resolution, parsing and error reporting.

Example
-------
>>> from bootstrap_quant.config.loader import load_config
>>> from bootstrap_quant.config.schemas import BootstrapConfig
>>>
>>> config = load_config("configs/sharpe_daily.yaml", BootstrapConfig)
>>> print(config.n_resamples)
5000
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Type, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

__all__ = ["load_config", "save_config", "ConfigError"]

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class ConfigError(Exception):
    """Raised when configuration loading or validation fails."""


def _default_project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def _resolve_config_path(file_path: Union[str, Path], project_root: Optional[Path] = None) -> Path:
    """Resolve a configuration path.

    Absolute paths are used as-is; relative paths are tried against the
    project root first and then the current working directory.

    Raises
    ------
    FileNotFoundError
        If the file does not exist in any candidate location
    """
    path = Path(file_path)

    if path.is_absolute() and path.exists():
        return path

    if project_root is None:
        project_root = _default_project_root()

    resolved = project_root / path
    if resolved.exists():
        return resolved

    if path.exists():
        return path.resolve()

    raise FileNotFoundError(f"Config file not found: {file_path}")


def load_config(
    file_path: Union[str, Path],
    schema: Type[T],
    *,
    project_root: Optional[Path] = None,
    strict: bool = True,
) -> T:
    """Load and validate a YAML configuration file.

    Parameters
    ----------
    file_path : str or Path
        Path to YAML configuration file
    schema : Type[BaseModel]
        Pydantic model class to validate against
    project_root : Path, optional
        Project root directory for path resolution
    strict : bool, default=True
        If True, raise on any failure. If False, log a warning and return
        the schema's default instance.

    Raises
    ------
    ConfigError
        If file loading or validation fails (only when strict=True)
    """
    try:
        resolved_path = _resolve_config_path(file_path, project_root)

        logger.debug("Loading config from: %s", resolved_path)
        with open(resolved_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is None:
            raise ConfigError(f"Empty configuration file: {file_path}")

        try:
            config = schema.model_validate(data)
        except ValidationError as e:
            error_msg = f"Configuration validation failed for {file_path}:\n{e}"
            if strict:
                raise ConfigError(error_msg) from e
            logger.warning(error_msg)
            logger.warning("Returning default configuration")
            return schema()
        logger.info("Successfully loaded config: %s", resolved_path.name)
        return config

    except FileNotFoundError as e:
        if strict:
            raise ConfigError(f"Configuration file not found: {file_path}") from e
        logger.warning("Config file not found: %s, using defaults", file_path)
        return schema()
    except yaml.YAMLError as e:
        error_msg = f"Invalid YAML syntax in {file_path}: {e}"
        if strict:
            raise ConfigError(error_msg) from e
        logger.warning(error_msg)
        return schema()


def save_config(
    config: BaseModel, file_path: Union[str, Path], *, project_root: Optional[Path] = None
) -> Path:
    """Save a Pydantic configuration model to a YAML file.

    Relative paths are resolved against ``project_root``. Returns the
    absolute path written.
    """
    path = Path(file_path)

    if not path.is_absolute():
        if project_root is None:
            project_root = _default_project_root()
        path = project_root / path

    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="python", exclude_none=True)

    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(
            data,
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            indent=2,
        )

    logger.info("Saved configuration to: %s", path)
    return path
