import copy
import re
from pathlib import Path
from typing import Any

import commentjson  # type: ignore

from classaudit.inventory.filters import NameFilterSpec

DEFAULTS: dict[str, Any] = {
    "kinds": ["constants"],
    "classes": [],
    "filters": [],
    "scope": "comprehensive",
    "include_private": False,
    "show_source": False,
    "expand_hashes": False,
    "handle_errors": False,
    "hash_display": None,
    "format": "markdown",
    "markdown": {},
    "csv": {},
}

CHOICES: dict[str, tuple[str, ...]] = {
    "scope": ("strict", "comprehensive"),
    "hash_display": ("main", "keys", "details"),
    "format": ("markdown", "csv"),
}


class ConfigurationManager:
    """
    Manages loading and merging of audit configuration.

    A JSONC file may hold any key of ``DEFAULTS``. Filters are plain strings
    (substring match) or ``{"regex": "<pattern>"}`` objects.
    """

    def load_config(
        self, user_config_path: str | None, cli_overrides: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Loads defaults, merges with user JSONC, and applies CLI overrides.
        """
        config = copy.deepcopy(DEFAULTS)

        if user_config_path:
            self._merge_user_file(config, Path(user_config_path))

        # Apply CLI overrides (filtering out None values)
        config.update({k: v for k, v in cli_overrides.items() if v is not None})

        self._validate(config)
        return config

    @staticmethod
    def build_filters(entries: list[Any]) -> list[NameFilterSpec]:
        specs: list[NameFilterSpec] = []
        for entry in entries:
            if isinstance(entry, str):
                specs.append(entry)
            elif isinstance(entry, dict) and isinstance(entry.get("regex"), str):
                try:
                    specs.append(re.compile(entry["regex"]))
                except re.error as e:
                    raise ValueError(f"Invalid regex filter {entry['regex']!r}: {e}")
            else:
                raise ValueError(f"Invalid filter entry: {entry!r}")
        return specs

    def _merge_user_file(self, config: dict[str, Any], path: Path) -> None:
        if not path.is_file():
            raise FileNotFoundError(f"Config file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                user_conf = commentjson.load(f)
        except Exception as e:
            raise IOError(f"Failed to parse config file {path}: {e}")

        if not isinstance(user_conf, dict):
            raise ValueError(f"Config file {path} must contain a JSON object")

        unknown = sorted(set(user_conf) - set(DEFAULTS))
        if unknown:
            raise ValueError(f"Unknown config key(s) in {path}: {', '.join(unknown)}")
        config.update(user_conf)

    def _validate(self, config: dict[str, Any]) -> None:
        for key, allowed in CHOICES.items():
            value = config.get(key)
            if value is not None and value not in allowed:
                raise ValueError(
                    f"Invalid {key}: {value!r} (expected one of {', '.join(allowed)})"
                )

        for key in ("kinds", "classes", "filters"):
            if not isinstance(config[key], list):
                raise ValueError(f"'{key}' must be a list")

        for key in ("markdown", "csv"):
            if not isinstance(config[key], dict):
                raise ValueError(f"'{key}' must be an object of report options")
