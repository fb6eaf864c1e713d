"""Configuration loading — .apiposture.json/.yaml, APIPOSTURE_CONFIG, .env."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import orjson
import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from apiposture.models.config import ApiPostureConfig
from apiposture.models.types import Severity

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "APIPOSTURE_CONFIG"

CONFIG_FILENAMES: tuple[str, ...] = (
    ".apiposture.json",
    "apiposture.json",
    ".apiposture.config.json",
    ".apiposture.yaml",
    ".apiposture.yml",
)


class ConfigError(ValueError):
    """An explicitly requested config file is missing or invalid."""


def find_config_file(start: Path | str | None = None) -> Path | None:
    """Search ``start`` (default: CWD) and its parents for a known config file name."""
    directory = Path(start or Path.cwd()).resolve()
    for candidate in (directory, *directory.parents):
        for name in CONFIG_FILENAMES:
            path = candidate / name
            if path.is_file():
                return path
    return None


def load_config(path: Path | str | None = None, search_from: Path | str | None = None) -> ApiPostureConfig:
    """Load config from ``path``, $APIPOSTURE_CONFIG, or the nearest config file.

    A file named explicitly (argument or env var) must exist and parse, else
    ConfigError. Problems with an auto-discovered file fall back to defaults.
    """
    # .env does not override variables already set
    load_dotenv()

    explicit = path or os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        config_path = Path(explicit)
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
        return _load_file(config_path)

    found = find_config_file(search_from)
    if found is None:
        return ApiPostureConfig()
    try:
        return _load_file(found)
    except ConfigError as e:
        logger.warning("%s; using defaults", e)
        return ApiPostureConfig()


def _load_file(path: Path) -> ApiPostureConfig:
    try:
        raw = _read_raw(path)
    except (OSError, orjson.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e

    if raw is None:
        return ApiPostureConfig()
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be an object")

    raw = _clean(raw, path)
    try:
        config = ApiPostureConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e
    logger.debug("Loaded config from %s", path)
    return config


def _read_raw(path: Path) -> Any:
    if path.suffix.lower() in (".yaml", ".yml"):
        with open(path) as f:
            return yaml.safe_load(f)
    return orjson.loads(path.read_bytes())


def _clean(raw: dict[str, Any], path: Path) -> dict[str, Any]:
    """Drop entries that would otherwise fail the whole file."""
    raw = dict(raw)

    suppressions = raw.get("suppressions") or []
    if not isinstance(suppressions, list):
        raise ConfigError(f"{path}: \"suppressions\" must be a list")
    kept = []
    for i, entry in enumerate(suppressions):
        if not isinstance(entry, dict) or not str(entry.get("reason") or "").strip():
            logger.warning("%s: suppression #%d has no reason, skipping", path, i + 1)
            continue
        kept.append(entry)
    raw["suppressions"] = kept

    rules = raw.get("rules") or {}
    if not isinstance(rules, dict):
        raise ConfigError(f"{path}: \"rules\" must be an object")
    cleaned_rules: dict[str, Any] = {}
    for rule_id, rule_cfg in rules.items():
        if not isinstance(rule_cfg, dict):
            logger.warning("%s: rule %s config must be an object, skipping", path, rule_id)
            continue
        rule_cfg = dict(rule_cfg)
        severity = rule_cfg.get("severity")
        if severity is not None and Severity.parse(str(severity)) is None:
            logger.warning("%s: unknown severity %r for %s, ignoring", path, severity, rule_id)
            rule_cfg.pop("severity")
        elif severity is not None:
            rule_cfg["severity"] = Severity.parse(str(severity))
        cleaned_rules[rule_id] = rule_cfg
    raw["rules"] = cleaned_rules
    return raw
