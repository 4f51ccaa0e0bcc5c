"""Settings for an analysis run, optionally loaded from ``.flogrc.json``."""

from __future__ import annotations

import importlib
import json
import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from flogjs.mode import Mode

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".flogrc.json"
DEFAULT_EXCLUDE = ("**/*.test.*", "**/*.spec.*")

# .flogrc.json key -> Settings attribute
_FILE_KEYS = {
    "methodsOnly": "methods_only",
    "weights": "weights",
    "modes": "modes",
    "plugins": "modes",
    "mode": "mode",
    "exclude": "exclude",
    "include": "include",
    "threshold": "threshold",
    "format": "format",
}


class ConfigError(Exception):
    """Raised for unreadable configuration or unloadable external modes."""


@dataclass
class Settings:
    """Options recognised by the analyzer and the CLI."""

    methods_only: bool = False  # ignore code outside function scopes
    weights: dict[str, float] = field(default_factory=dict)  # pattern -> weight overrides
    modes: list[str] = field(default_factory=list)  # "package.module:ModeClass" paths
    mode: str | None = None  # skip detection and always use this mode
    exclude: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    include: list[str] = field(default_factory=list)
    threshold: str | float = 60
    format: str = "table"  # console output: "table", "group" or "json"

    def merged(self, **overrides: Any) -> Settings:
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def merge_config(overrides: dict | None = None) -> Settings:
    """Build Settings from defaults plus raw ``.flogrc.json`` style values.

    Unknown keys are ignored.
    """
    known = {f.name for f in fields(Settings)}
    values: dict[str, Any] = {}
    for key, value in (overrides or {}).items():
        attr = _FILE_KEYS.get(key, key)
        if attr not in known:
            logger.debug("Ignoring unknown config key %r", key)
            continue
        values[attr] = value

    if "weights" in values:
        try:
            values["weights"] = {str(k): float(v) for k, v in values["weights"].items()}
        except (AttributeError, TypeError, ValueError) as e:
            raise ConfigError(f"'weights' must map pattern names to numbers: {e}") from e
    for key in ("modes", "exclude", "include"):
        if key in values and isinstance(values[key], str):
            values[key] = [values[key]]

    return Settings(**values)


def load_config(cwd: str | Path | None = None) -> Settings:
    """Load ``.flogrc.json`` from ``cwd`` (default: current directory).

    Returns default Settings when the file does not exist.

    Raises:
        ConfigError: If the file is not valid JSON or not a JSON object.
    """
    path = Path(cwd or ".") / CONFIG_FILENAME
    if not path.exists():
        return Settings()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a JSON object")

    logger.debug("Loaded configuration from %s", path)
    return merge_config(raw)


def _import_object(path: str) -> Any:
    if ":" in path:
        module_name, _, attr = path.partition(":")
    else:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise ConfigError(f"Mode path must look like 'package.module:ModeClass', got {path!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import mode module {module_name!r}: {e}") from e
    try:
        return getattr(module, attr)
    except AttributeError as e:
        raise ConfigError(f"Module {module_name!r} has no attribute {attr!r}") from e


def load_modes(paths: list[str]) -> list[Mode]:
    """Import and instantiate external modes from dotted paths."""
    loaded: list[Mode] = []
    for path in paths:
        obj = _import_object(path)
        if isinstance(obj, type) and issubclass(obj, Mode):
            obj = obj()
        if not isinstance(obj, Mode):
            raise ConfigError(f"{path!r} is not a Mode subclass or instance")
        loaded.append(obj)
    return loaded
