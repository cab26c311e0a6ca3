from pathlib import Path

import pytest

from hugin.config import (
    DEFAULT_EXTENSIONS,
    CCFinderSWConfig,
    CloneDetectorKind,
    Config,
    Language,
    load_config,
)
from hugin.errors import InvalidConfigurationError


def _executable(tmp_path: Path) -> Path:
    exe = tmp_path / "bin" / "CCFinderSW"
    exe.parent.mkdir(parents=True, exist_ok=True)
    exe.write_text("#!/bin/sh\n", "utf-8")
    return exe


def _detector_mapping(exe: Path, **overrides: object) -> dict[str, object]:
    raw: dict[str, object] = {
        "executable_path": str(exe),
        "token_length": 50,
        "language": "CPlusPlus",
        "extensions": ["pde", "ino"],
    }
    raw.update(overrides)
    return raw


def test_defaults() -> None:
    config = Config()
    assert config.clone_detector_kind is CloneDetectorKind.CCFINDERSW
    assert config.database_path is None
    detector = config.clone_detector_config
    assert detector.executable_path == Path("CCFinderSW")
    assert detector.token_length == 50
    assert detector.language is Language.CPLUSPLUS
    assert detector.extensions == DEFAULT_EXTENSIONS


def test_option_values() -> None:
    config = CCFinderSWConfig(token_length=30, extensions=("pde", "ino", "cpp"))
    assert config.language_to_option_value() == "cpp"
    assert config.token_length_to_option_value() == "30"
    assert config.extensions_to_option_value() == "pde|ino|cpp"


def test_from_mapping(tmp_path: Path) -> None:
    exe = _executable(tmp_path)
    config = CCFinderSWConfig.from_mapping(_detector_mapping(exe))
    assert config.executable_path == exe.resolve()
    assert config.extensions == ("pde", "ino")
    assert config.timeout_seconds is None


def test_from_mapping_accepts_string_forms(tmp_path: Path) -> None:
    exe = _executable(tmp_path)
    config = CCFinderSWConfig.from_mapping(
        _detector_mapping(exe, token_length="42", extensions="pde, ino,,h")
    )
    assert config.token_length == 42
    assert config.extensions == ("pde", "ino", "h")


def test_from_mapping_expands_home(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    exe = _executable(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    config = CCFinderSWConfig.from_mapping(
        _detector_mapping(exe, executable_path="~/bin/CCFinderSW")
    )
    assert config.executable_path == exe.resolve()


def test_to_mapping_round_trip(tmp_path: Path) -> None:
    exe = _executable(tmp_path)
    config = CCFinderSWConfig.from_mapping(
        _detector_mapping(exe, timeout_seconds=120)
    )
    assert CCFinderSWConfig.from_mapping(config.to_mapping()) == config
    assert config.to_mapping()["timeout_seconds"] == 120.0


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("token_length", 0),
        ("token_length", -5),
        ("token_length", True),
        ("token_length", "fifty"),
        ("language", "Rust"),
        ("extensions", []),
        ("extensions", [1, 2]),
        ("extensions", 7),
        ("timeout_seconds", 0),
        ("timeout_seconds", "soon"),
        ("executable_path", ""),
    ],
)
def test_from_mapping_rejects_invalid_values(
    tmp_path: Path, key: str, value: object
) -> None:
    exe = _executable(tmp_path)
    with pytest.raises(InvalidConfigurationError, match=key):
        CCFinderSWConfig.from_mapping(_detector_mapping(exe, **{key: value}))


@pytest.mark.parametrize(
    "key", ["executable_path", "token_length", "language", "extensions"]
)
def test_from_mapping_requires_keys(tmp_path: Path, key: str) -> None:
    raw = _detector_mapping(_executable(tmp_path))
    del raw[key]
    with pytest.raises(InvalidConfigurationError, match="Missing key"):
        CCFinderSWConfig.from_mapping(raw)


def test_missing_executable(tmp_path: Path) -> None:
    with pytest.raises(InvalidConfigurationError, match="canonicalize"):
        CCFinderSWConfig.from_mapping(_detector_mapping(tmp_path / "nope"))


def test_load_config(tmp_path: Path) -> None:
    exe = _executable(tmp_path)
    path = tmp_path / "config.toml"
    path.write_text(
        'clone_detector_kind = "CCFinderSW"\n'
        'database_path = "db"\n'
        "\n"
        "[clone_detector_config]\n"
        f'executable_path = "{exe.as_posix()}"\n'
        "token_length = 60\n"
        'language = "CPlusPlus"\n'
        'extensions = ["ino"]\n',
        "utf-8",
    )
    config = load_config(path)
    assert config.clone_detector_kind is CloneDetectorKind.CCFINDERSW
    assert config.database_path == tmp_path.resolve() / "db"
    assert config.clone_detector_config.token_length == 60
    assert config.clone_detector_config.extensions == ("ino",)


def test_load_config_rejects_unknown_detector(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        'clone_detector_kind = "NiCad"\n[clone_detector_config]\n', "utf-8"
    )
    with pytest.raises(InvalidConfigurationError, match="clone_detector_kind"):
        load_config(path)


def test_load_config_requires_detector_table(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('clone_detector_kind = "CCFinderSW"\n', "utf-8")
    with pytest.raises(InvalidConfigurationError, match="clone_detector_config"):
        load_config(path)


def test_load_config_invalid_toml(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("clone_detector_kind = \n", "utf-8")
    with pytest.raises(InvalidConfigurationError, match="Invalid configuration"):
        load_config(path)


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(InvalidConfigurationError, match="Cannot read"):
        load_config(tmp_path / "missing.toml")
