from __future__ import annotations

from pathlib import Path

import pytest

from hexfind.config import ConfigError, Settings, get_user_config_path, load_settings, parse_settings


def test_defaults() -> None:
    s = Settings()
    assert s.line_width == 16
    assert s.context == 0
    assert s.chunk_size == 1024
    assert s.endian == "big"
    assert s.color is True


def test_parse_yaml() -> None:
    s = parse_settings("line_width: 8\ncontext: 3\nendian: LITTLE\ncolor: false\n")
    assert (s.line_width, s.context, s.endian, s.color) == (8, 3, "little", False)


def test_empty_document_is_defaults() -> None:
    assert parse_settings("") == Settings()


@pytest.mark.parametrize(
    "text",
    [
        "line_width: 0",
        "context: 11",
        "context: -1",
        "chunk_size: 0",
        "endian: middle",
        "color: maybe",
        "line_width: '16'",
        "line_width: true",
        "highlight_style: ''",
        "colour: true",
        "- 1\n- 2",
        "line_width: [",
    ],
)
def test_invalid_settings(text: str) -> None:
    with pytest.raises(ConfigError):
        parse_settings(text)


def test_unknown_key_named() -> None:
    with pytest.raises(ConfigError, match="colour"):
        parse_settings("colour: true", source="cfg.yaml")


def test_merged_ignores_none_and_validates() -> None:
    s = Settings().merged(line_width=None, context=2)
    assert s.line_width == 16 and s.context == 2
    with pytest.raises(ConfigError):
        Settings().merged(context=20)


def test_load_explicit_path(tmp_path: Path) -> None:
    cfg = tmp_path / "hexfind.yaml"
    cfg.write_text("context: 4\n", encoding="utf-8")
    assert load_settings(cfg).context == 4


def test_load_missing_explicit_path(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "nope.yaml")


def test_default_location_is_optional(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("APPDATA", str(tmp_path))
    assert load_settings() == Settings()


def test_default_location_is_read(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("APPDATA", str(tmp_path))
    path = get_user_config_path()
    path.parent.mkdir(parents=True)
    path.write_text("line_width: 32\n", encoding="utf-8")
    assert load_settings().line_width == 32


@pytest.mark.parametrize("style", ["definitely not a colour", "bogus colour", "bold on"])
def test_unparseable_highlight_style_rejected(style: str) -> None:
    with pytest.raises(ConfigError, match="highlight_style"):
        parse_settings(f"highlight_style: '{style}'")


def test_valid_highlight_styles_accepted() -> None:
    assert parse_settings("highlight_style: 'reverse green'").highlight_style == "reverse green"
    assert parse_settings("highlight_style: '#ff8800 on black'").highlight_style
