"""
Hugin — Arduino project code cloning detector: job dispatcher.

Copyright (c) 2026 ikubaku
Licensed under the MIT License.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLE = "CCFinderSW"
DEFAULT_TOKEN_LENGTH = 50
DEFAULT_EXTENSIONS = ("pde", "ino")


class CloneDetectorKind(str, Enum):
    CCFINDERSW = "CCFinderSW"


class Language(str, Enum):
    CPLUSPLUS = "CPlusPlus"

    @property
    def option_value(self) -> str:
        return _LANGUAGE_OPTION_VALUES[self]


_LANGUAGE_OPTION_VALUES: dict[Language, str] = {
    Language.CPLUSPLUS: "cpp",
}


def _require(raw: Mapping[str, object], key: str) -> object:
    if key not in raw:
        raise InvalidConfigurationError(f"Missing key: `{key}`")
    return raw[key]


def _parse_executable_path(value: object) -> Path:
    if not isinstance(value, str) or not value:
        raise InvalidConfigurationError("Invalid value for `executable_path`")
    try:
        return Path(value).expanduser().resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise InvalidConfigurationError(
            f"Could not canonicalize the specified path: {value}"
        ) from e


def _parse_token_length(value: object) -> int:
    if isinstance(value, str) and value.strip().isdecimal():
        value = int(value.strip())
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidConfigurationError("Invalid value for `token_length`")
    return value


def _parse_language(value: object) -> Language:
    try:
        return Language(value)
    except ValueError:
        raise InvalidConfigurationError("Invalid value for `language`") from None


def _parse_extensions(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        items: list[object] = list(value.split(","))
    elif isinstance(value, list):
        items = list(value)
    else:
        raise InvalidConfigurationError("Invalid value for `extensions`")
    if not all(isinstance(item, str) for item in items):
        raise InvalidConfigurationError("Invalid value for `extensions`")
    extensions = tuple(str(item).strip() for item in items if str(item).strip())
    if not extensions:
        raise InvalidConfigurationError("Invalid value for `extensions`")
    return extensions


def _parse_timeout(value: object) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise InvalidConfigurationError("Invalid value for `timeout_seconds`")
    return float(value)


@dataclass(frozen=True, slots=True)
class CCFinderSWConfig:
    executable_path: Path = Path(DEFAULT_EXECUTABLE)
    token_length: int = DEFAULT_TOKEN_LENGTH
    language: Language = Language.CPLUSPLUS
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    timeout_seconds: float | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> CCFinderSWConfig:
        return cls(
            executable_path=_parse_executable_path(_require(raw, "executable_path")),
            token_length=_parse_token_length(_require(raw, "token_length")),
            language=_parse_language(_require(raw, "language")),
            extensions=_parse_extensions(_require(raw, "extensions")),
            timeout_seconds=_parse_timeout(raw.get("timeout_seconds")),
        )

    def to_mapping(self) -> dict[str, object]:
        mapping: dict[str, object] = {
            "executable_path": str(self.executable_path),
            "token_length": self.token_length,
            "language": self.language.value,
            "extensions": list(self.extensions),
        }
        if self.timeout_seconds is not None:
            mapping["timeout_seconds"] = self.timeout_seconds
        return mapping

    def language_to_option_value(self) -> str:
        return self.language.option_value

    def token_length_to_option_value(self) -> str:
        return str(self.token_length)

    def extensions_to_option_value(self) -> str:
        return "|".join(self.extensions)


@dataclass(frozen=True, slots=True)
class Config:
    clone_detector_kind: CloneDetectorKind = CloneDetectorKind.CCFINDERSW
    clone_detector_config: CCFinderSWConfig = field(default_factory=CCFinderSWConfig)
    database_path: Path | None = None

    @classmethod
    def from_mapping(
        cls, raw: Mapping[str, object], *, base_dir: Path | None = None
    ) -> Config:
        try:
            kind = CloneDetectorKind(_require(raw, "clone_detector_kind"))
        except ValueError:
            raise InvalidConfigurationError(
                "Invalid value for `clone_detector_kind`"
            ) from None

        detector_raw = _require(raw, "clone_detector_config")
        if not isinstance(detector_raw, Mapping):
            raise InvalidConfigurationError(
                "Invalid value for `clone_detector_config`"
            )

        database_path: Path | None = None
        database_raw = raw.get("database_path")
        if database_raw is not None:
            if not isinstance(database_raw, str) or not database_raw:
                raise InvalidConfigurationError("Invalid value for `database_path`")
            database_path = Path(database_raw).expanduser()
            if base_dir is not None and not database_path.is_absolute():
                database_path = base_dir / database_path

        return cls(
            clone_detector_kind=kind,
            clone_detector_config=CCFinderSWConfig.from_mapping(detector_raw),
            database_path=database_path,
        )


def load_config(path: str | Path) -> Config:
    config_path = Path(path)
    try:
        with config_path.open("rb") as f:
            raw = tomllib.load(f)
    except OSError as e:
        raise InvalidConfigurationError(
            f"Cannot read configuration file {config_path}: {e}"
        ) from e
    except tomllib.TOMLDecodeError as e:
        raise InvalidConfigurationError(
            f"Invalid configuration file {config_path}: {e}"
        ) from e

    config = Config.from_mapping(raw, base_dir=config_path.resolve().parent)
    logger.debug("Loaded configuration: %s", config)
    return config
