"""Functions for reading and validating configuration files.

TOML reading and the flattening of pydantic errors into ``loc: msg`` strings
are adapted from the forestcensus (``forcen.config.loader``) configuration
loader.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Type

from pydantic import BaseModel, ValidationError

from ..exceptions import ConfigError
from .models import ConfigBundle, CountsConfig, ReportConfig, ScalingConfig


class ConfigFiles:
    """Canonical configuration filenames."""

    REPORT = "report.toml"
    COUNTS = "counts.toml"
    SCALING = "scaling.toml"


def load_config_bundle(root: Path) -> ConfigBundle:
    """Load configuration files from *root* directory.

    Only ``report.toml`` is required; the others fall back to defaults.
    """

    root = Path(root)
    report = _load_toml(root / ConfigFiles.REPORT, ReportConfig)
    counts = _load_optional(root / ConfigFiles.COUNTS, CountsConfig)
    scaling = _load_optional(root / ConfigFiles.SCALING, ScalingConfig)
    return ConfigBundle(report=report, counts=counts, scaling=scaling)


def _load_optional(path: Path, model: Type[BaseModel]) -> Any:
    if not path.exists():
        return model()
    return _load_toml(path, model)


def _load_toml(path: Path, model: Type[BaseModel]) -> Any:
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(path, "file not found") from exc
    except (tomllib.TOMLDecodeError, OSError) as exc:
        raise ConfigError(path, f"failed to read TOML: {exc}") from exc

    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(path, format_validation_errors(exc)) from exc


def format_validation_errors(error: ValidationError) -> str:
    messages = []
    for err in error.errors(include_context=False):
        loc = _format_location(err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        if loc:
            messages.append(f"{loc}: {msg}")
        else:
            messages.append(msg)
    return "; ".join(messages)


def _format_location(loc: tuple[Any, ...]) -> str:
    if not loc:
        return ""

    parts: list[str] = []
    for entry in loc:
        if isinstance(entry, int):
            if not parts:
                parts.append(f"[{entry}]")
            else:
                parts[-1] = parts[-1] + f"[{entry}]"
        else:
            parts.append(str(entry))
    return ".".join(parts)
