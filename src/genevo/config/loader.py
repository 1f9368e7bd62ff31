"""YAML engine configuration files.

Relative paths are looked up under the settings' project root, then under
``Settings.configs_dir``, then the working directory, so a run can be
started with just the file name of a bundled config:

>>> from genevo.config.loader import load_config
>>> load_config("onemax.yaml").population_size
50
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Type, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

from .schemas import EngineConfig
from .settings import get_settings

__all__ = ["load_config", "save_config", "ConfigError"]

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)
PathLike = Union[str, Path]


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or validated."""


def _search_roots(project_root: Optional[Path]) -> list[Path]:
    if project_root is not None:
        return [Path(project_root)]
    settings = get_settings()
    return [settings.project_root, settings.configs_dir]


def _resolve_config_path(file_path: PathLike, project_root: Optional[Path] = None) -> Path:
    """Locate ``file_path``; raises ``FileNotFoundError`` when no candidate exists."""

    path = Path(file_path)
    if path.is_absolute():
        if path.exists():
            return path
    else:
        for root in _search_roots(project_root):
            candidate = root / path
            if candidate.exists():
                return candidate
        if path.exists():
            return path.resolve()
    raise FileNotFoundError(f"Config file not found: {file_path}")


def _read_yaml(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def _fallback(schema: Type[T], message: str, *args: Any) -> T:
    logger.warning(message, *args)
    logger.warning("Returning default %s", schema.__name__)
    return schema()


def load_config(
    file_path: PathLike,
    schema: Type[T] = EngineConfig,  # type: ignore[assignment]
    *,
    project_root: Optional[Path] = None,
    strict: bool = True,
) -> T:
    """Read a YAML file and validate it against ``schema``.

    Parameters
    ----------
    file_path : str or Path
        Absolute path, or a path relative to the search roots.
    schema : type of BaseModel, default=EngineConfig
        Model the YAML mapping is validated against.
    project_root : Path, optional
        Single search root replacing the settings' roots.
    strict : bool, default=True
        Raise :class:`ConfigError` on a missing file, invalid YAML or a
        validation failure. When False those cases log a warning and
        return ``schema()``.

    Raises
    ------
    ConfigError
        Always for an empty file; otherwise only when ``strict``.
    """

    try:
        resolved = _resolve_config_path(file_path, project_root)
    except FileNotFoundError as exc:
        if strict:
            raise ConfigError(f"Configuration file not found: {file_path}") from exc
        return _fallback(schema, "Config file not found: %s", file_path)

    logger.debug("Loading %s from %s", schema.__name__, resolved)
    try:
        data = _read_yaml(resolved)
    except yaml.YAMLError as exc:
        if strict:
            raise ConfigError(f"Invalid YAML syntax in {file_path}: {exc}") from exc
        return _fallback(schema, "Invalid YAML syntax in %s: %s", file_path, exc)

    if data is None:
        raise ConfigError(f"Empty configuration file: {file_path}")

    try:
        config = schema.model_validate(data)
    except ValidationError as exc:
        message = f"Configuration validation failed for {file_path}:\n{exc}"
        if strict:
            raise ConfigError(message) from exc
        return _fallback(schema, "%s", message)

    logger.info("Loaded %s from %s", schema.__name__, resolved.name)
    return config


def save_config(
    config: BaseModel, file_path: PathLike, *, project_root: Optional[Path] = None
) -> Path:
    """Write ``config`` as YAML, omitting ``None`` fields; returns the written path.

    Relative paths are anchored at ``project_root`` or, when omitted, at the
    settings' project root. Parent directories are created.
    """

    path = Path(file_path)
    if not path.is_absolute():
        root = Path(project_root) if project_root is not None else get_settings().project_root
        path = root / path
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="python", exclude_none=True)
    with open(path, "w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, default_flow_style=False, sort_keys=False, indent=2)

    logger.info("Saved %s to %s", type(config).__name__, path)
    return path
