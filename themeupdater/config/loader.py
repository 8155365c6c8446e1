"""Read themeupdater.yaml and layer it under env vars and runtime overrides."""

from __future__ import annotations

import difflib
import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from themeupdater.config.models import UpdaterConfig

ENV_PREFIX = "THEMEUPDATER_"


class ConfigLoadError(ValueError):
    """Raised when themeupdater.yaml cannot be read into UpdaterConfig fields."""


class YAMLConfigLoader:
    """One themeupdater.yaml file, checked against the UpdaterConfig fields.

    Unknown keys in the file raise ConfigLoadError. Unknown THEMEUPDATER_*
    env vars are still ignored.
    """

    DEFAULT_FILENAME = "themeupdater.yaml"
    PATH_ENV_VAR = f"{ENV_PREFIX}CONFIG"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @classmethod
    def resolve_path(cls, explicit_path: str | Path | None = None) -> Path:
        """THEMEUPDATER_CONFIG wins, then ``explicit_path``, then ./themeupdater.yaml."""
        env_path = os.environ.get(cls.PATH_ENV_VAR, "").strip()
        if env_path:
            return Path(env_path)
        if explicit_path is not None and str(explicit_path).strip():
            return Path(str(explicit_path).strip())
        return Path.cwd() / cls.DEFAULT_FILENAME

    @classmethod
    def discover(cls, explicit_path: str | Path | None = None) -> YAMLConfigLoader:
        return cls(cls.resolve_path(explicit_path))

    def read(self) -> dict[str, Any]:
        """Return the file's settings. A missing or blank file has none."""
        if not self.path.exists():
            return {}
        data = self._parse(self.path.read_text(encoding="utf-8"))
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigLoadError(f"Config root must be mapping: {self.path}")
        self._reject_unknown_keys(data)
        return data

    def _parse(self, text: str) -> Any:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            mark = getattr(exc, "problem_mark", None)
            if mark is None:
                raise ConfigLoadError(f"Invalid YAML at {self.path}") from exc
            raise ConfigLoadError(f"Invalid YAML at {self.path}:{mark.line + 1}:{mark.column + 1}") from exc

    def _reject_unknown_keys(self, data: dict[Any, Any]) -> None:
        known = list(UpdaterConfig.model_fields)
        problems = []
        for key in sorted(str(key) for key in data if key not in UpdaterConfig.model_fields):
            suggestion = difflib.get_close_matches(key, known, n=1)
            problems.append(f"{key} (did you mean {suggestion[0]}?)" if suggestion else key)
        if problems:
            raise ConfigLoadError(f"Unknown setting(s) in {self.path}: {', '.join(problems)}")


def _collect_env_overrides(prefix: str = ENV_PREFIX) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for name in UpdaterConfig.model_fields:
        raw_value = os.environ.get(f"{prefix}{name.upper()}")
        if raw_value is not None:
            overrides[name] = raw_value
    return overrides


def load_config(path: str | Path | None = None, **overrides: Any) -> UpdaterConfig:
    """Build config from YAML, then THEMEUPDATER_* env vars, then overrides."""
    file_values = YAMLConfigLoader.discover(path).read()
    merged = {**file_values, **_collect_env_overrides(), **overrides}
    return UpdaterConfig(**merged)
