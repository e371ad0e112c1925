"""Settings loading and validation for the optional YAML config file."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from samplemem.core.errors import ConfigError
from samplemem.core.progress import DEFAULT_INITIAL_COUNTDOWN, DEFAULT_INTERVAL_S

LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class ProgressSettings:
    enabled: bool = True
    initial_countdown: int = DEFAULT_INITIAL_COUNTDOWN
    interval_s: float = DEFAULT_INTERVAL_S


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    progress: ProgressSettings = ProgressSettings()
    source: Path | None = None


def default_config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "samplemem/config.yaml"


def _load_schema_validator() -> Any:
    schema_text = resources.files("samplemem.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at root")
    return loaded


def _build_settings(doc: dict[str, Any], source: Path) -> Settings:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    progress_doc = doc.get("progress", {})
    progress = ProgressSettings(
        enabled=progress_doc.get("enabled", True),
        initial_countdown=int(progress_doc.get("initial_countdown", DEFAULT_INITIAL_COUNTDOWN)),
        interval_s=float(progress_doc.get("interval_s", DEFAULT_INTERVAL_S)),
    )
    return Settings(log_level=doc.get("log_level", "WARNING"), progress=progress, source=source)


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from `path`, or from the XDG default location.

    A missing file at the default location yields default settings; an
    explicitly requested file must exist.
    """
    if path is None:
        path = default_config_path()
        if not path.is_file():
            return Settings()

    settings = _build_settings(_read_yaml(path), path)
    LOGGER.debug("Loaded settings from %s", path)
    return settings
