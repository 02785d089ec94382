"""Load FolioConfig from files, the environment, and explicit overrides.

Precedence, lowest to highest:

1. ``Secrets.toml`` ``DATABASE_URL`` (database URL fallback only)
2. ``folio.yaml`` / ``folio.yml`` / ``folio.toml`` in the site root
3. Environment variables (``DATABASE_URL``, ``ADMIN_URL``, ``FOLIO_*``)
4. Keyword overrides (CLI flags); ``None`` means "not given"
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path

import yaml

from folio._errors import ConfigError
from folio.config import FolioConfig

_KNOWN_KEYS = frozenset({
    "database_url", "output", "static_dir", "templates_dir", "admin_url",
    "workers", "pool_size", "pool_timeout",
})

_ENV_KEYS = {
    "DATABASE_URL": "database_url",
    "ADMIN_URL": "admin_url",
    "FOLIO_OUTPUT": "output",
    "FOLIO_STATIC_DIR": "static_dir",
    "FOLIO_TEMPLATES_DIR": "templates_dir",
    "FOLIO_WORKERS": "workers",
    "FOLIO_POOL_SIZE": "pool_size",
    "FOLIO_POOL_TIMEOUT": "pool_timeout",
}

_INT_KEYS = frozenset({"workers", "pool_size"})
_FLOAT_KEYS = frozenset({"pool_timeout"})


def load_config(
    root: Path,
    *,
    environ: Mapping[str, str] | None = None,
    **overrides: object,
) -> FolioConfig:
    """Build a FolioConfig for the site at ``root``.

    Args:
        root: Site root directory.
        environ: Environment to read (defaults to ``os.environ``).
        **overrides: FolioConfig fields; ``None`` values are ignored.

    Raises:
        ConfigError: If a config file is malformed or a value has the wrong type.

    """
    env = os.environ if environ is None else environ

    merged: dict[str, object] = {}
    secrets_url = _read_secrets_database_url(root)
    if secrets_url:
        merged["database_url"] = secrets_url
    merged.update(_read_folio_config(root))
    merged.update(_read_environment(env))
    merged.update({k: v for k, v in overrides.items() if v is not None})

    return FolioConfig(root=root, **_coerce(merged))


def _read_folio_config(root: Path) -> dict[str, object]:
    """Read folio config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("folio.yaml", "folio.yml"):
        path = root / name
        if path.is_file():
            return _flatten_folio_section(_parse_yaml(path))
    toml_path = root / "folio.toml"
    if toml_path.is_file():
        return _flatten_folio_section(_parse_toml(toml_path))
    return {}


def _read_secrets_database_url(root: Path) -> str | None:
    """``DATABASE_URL`` from a deployment ``Secrets.toml``, if there is one."""
    path = root / "Secrets.toml"
    if not path.is_file():
        return None
    value = _parse_toml(path).get("DATABASE_URL")
    return str(value) if value else None


def _read_environment(env: Mapping[str, str]) -> dict[str, object]:
    return {key: env[var] for var, key in _ENV_KEYS.items() if env.get(var)}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)
    return data


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc


def _flatten_folio_section(data: dict[str, object]) -> dict[str, object]:
    """Extract folio.* keys into top-level config; drop unknown keys."""
    result: dict[str, object] = {}
    for k, v in data.items():
        if k in _KNOWN_KEYS:
            result[k] = v
    folio = data.get("folio")
    if isinstance(folio, dict):
        for k, v in folio.items():
            if k in _KNOWN_KEYS:
                result[k] = v
    return result


def _coerce(values: dict[str, object]) -> dict[str, object]:
    """Normalize string values from files and the environment."""
    result = dict(values)
    if "output" in result and not isinstance(result["output"], Path):
        result["output"] = Path(str(result["output"]))
    for key in _INT_KEYS & result.keys():
        result[key] = _as_number(key, result[key], int)
    for key in _FLOAT_KEYS & result.keys():
        result[key] = _as_number(key, result[key], float)
    return result


def _as_number(key: str, value: object, kind: type[int] | type[float]) -> int | float:
    try:
        return kind(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        msg = f"{key} must be a number, got {value!r}"
        raise ConfigError(msg) from exc
