"""Typed access to DASHENC_* environment variables.

EnvReader takes an optional mapping in place of os.environ, so settings that
come from the environment can be tested without touching the process
environment.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})


class EnvReader:
    """Read environment variables as str, int, float, bool or Path.

    Unset variables yield the supplied default. Values that cannot be
    converted are logged and also yield the default.

    Example:
        reader = EnvReader(env={"DASHENC_CRUSH_TOLERANCE": "0.9"})
        reader.get_float("DASHENC_CRUSH_TOLERANCE")  # 0.9
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def _convert(
        self,
        var: str,
        convert: Callable[[str], T],
        kind: str,
        default: T | None,
    ) -> T | None:
        raw = self._env.get(var)
        if raw is None:
            return default
        try:
            return convert(raw)
        except ValueError:
            logger.warning("Invalid %s value for %s: %s", kind, var, raw)
            return default

    def get_str(self, var: str, default: str | None = None) -> str | None:
        return self._env.get(var, default)

    def get_int(self, var: str, default: int | None = None) -> int | None:
        return self._convert(var, int, "integer", default)

    def get_float(self, var: str, default: float | None = None) -> float | None:
        return self._convert(var, float, "float", default)

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Any of true/1/yes/on (case-insensitive) is True, anything else False."""
        return self._convert(
            var, lambda raw: raw.strip().lower() in _TRUE_VALUES, "boolean", default
        )

    def get_path(
        self, var: str, must_exist: bool = True, default: Path | None = None
    ) -> Path | None:
        """Get a user-expanded path.

        Args:
            var: Environment variable name.
            must_exist: Ignore (with a warning) paths that do not exist.
            default: Returned when unset or ignored.
        """
        path = self._convert(var, lambda raw: Path(raw).expanduser(), "path", None)
        if path is None:
            return default
        if must_exist and not path.exists():
            logger.warning(
                "Environment variable %s points to non-existent path: %s", var, path
            )
            return default
        return path
