"""Load GazerConfig from gazer.yaml / gazer.toml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import random
from pathlib import Path

from gazer._errors import ConfigError
from gazer.config import DYNAMIC_PORT_MAX, DYNAMIC_PORT_MIN, GazerConfig

_KNOWN_KEYS = frozenset({
    "host", "port", "ws_port", "editor", "git", "repo_marker",
    "debounce_ms", "git_timeout", "language",
})


def load_config(root: Path, **overrides: object) -> GazerConfig:
    """Load GazerConfig from root, optionally merging gazer.yaml.

    Looks for gazer.yaml, gazer.yml, or gazer.toml in root. If found, loads
    and merges with overrides. Overrides take precedence; ``None`` overrides
    are ignored so unset CLI flags never mask file values.

    A ``port`` of 0 is replaced by a random port from the dynamic range.

    Raises:
        ConfigError: If a merged value has the wrong type.

    """
    file_config = _read_gazer_config(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    for key in ("port", "ws_port", "debounce_ms"):
        if key in merged and not isinstance(merged[key], int):
            msg = f"{key} must be an integer, got {merged[key]!r}"
            raise ConfigError(msg)
    if not merged.get("port"):
        merged["port"] = pick_port()
    return GazerConfig(root=root, **merged)  # type: ignore[arg-type]


def pick_port() -> int:
    """Pick a random port from the dynamic range, leaving room for ``port + 1``."""
    return random.randint(DYNAMIC_PORT_MIN, DYNAMIC_PORT_MAX - 1)


def _read_gazer_config(root: Path) -> dict[str, object]:
    """Read gazer config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("gazer.yaml", "gazer.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "gazer.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    """Parse YAML config. Returns empty dict on error."""
    import yaml

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(data, dict):
        return {}
    return _flatten_gazer_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    """Parse TOML config. Returns empty dict on error."""
    import tomllib

    try:
        data = tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    return _flatten_gazer_section(data)


def _flatten_gazer_section(data: dict[str, object]) -> dict[str, object]:
    """Extract gazer.* keys into top-level config."""
    result: dict[str, object] = {}
    for k, v in data.items():
        if k != "gazer" and k in _KNOWN_KEYS:
            result[k] = v
    gazer = data.get("gazer")
    if isinstance(gazer, dict):
        for k, v in gazer.items():
            if k in _KNOWN_KEYS:
                result[k] = v
    return result
