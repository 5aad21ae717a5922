from __future__ import annotations

from pathlib import Path

import pytest

from hexfind.cli import EXIT_ERROR, EXIT_FOUND, EXIT_NOT_FOUND, main


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # keep a developer's own config file out of the tests
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "home"))


def gzip_fixture(tmp_path: Path) -> Path:
    data = bytearray(b"\x00" * 64)
    data[0x12:0x15] = b"\x1f\x8b\x08"
    data[0x2E:0x31] = b"\x1f\x8b\x08"
    p = tmp_path / "image.bin"
    p.write_bytes(bytes(data))
    return p


def test_all_matches_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = gzip_fixture(tmp_path)
    rc = main(["--no-color", "1f 8b 08", str(path)])
    out = capsys.readouterr().out.splitlines()
    assert rc == EXIT_FOUND
    assert out[0] == "offset: 18 (00000012)"
    assert out[1].startswith("00000010  00 00 1f 8b 08 00")
    assert out[2] == ""
    assert out[3] == "offset: 46 (0000002e)"
    # match straddles the line end: two dump lines
    assert out[4].startswith("00000020")
    assert out[4].endswith("1f 8b  |................|")
    assert out[5].startswith("00000030  08 00")


def test_first_only(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = gzip_fixture(tmp_path)
    rc = main(["--no-color", "--first", "-e", "little", "0x088b1f", str(path)])
    out = capsys.readouterr().out
    assert rc == EXIT_FOUND
    assert out.count("offset:") == 1
    assert "offset: 18 (00000012)" in out


def test_context_and_width(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = gzip_fixture(tmp_path)
    rc = main(["--no-color", "--first", "-C", "2", "-w", "8", "1f 8b 08", str(path)])
    lines = capsys.readouterr().out.splitlines()
    assert rc == EXIT_FOUND
    headers = [ln[:8] for ln in lines[1:6]]
    assert headers == ["00000000", "00000008", "00000010", "00000018", "00000020"]


def test_not_found(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = gzip_fixture(tmp_path)
    rc = main(["de ad", str(path)])
    captured = capsys.readouterr()
    assert rc == EXIT_NOT_FOUND
    assert captured.out == ""
    assert "cannot find the bytes de ad" in captured.err


def test_invalid_pattern(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = gzip_fixture(tmp_path)
    rc = main(["1f xx", str(path)])
    assert rc == EXIT_ERROR
    assert "xx isn't a hexadecimal byte" in capsys.readouterr().err


def test_missing_file_does_not_stop_others(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = gzip_fixture(tmp_path)
    rc = main(["--no-color", "1f 8b 08", str(tmp_path / "missing.bin"), str(path)])
    captured = capsys.readouterr()
    assert rc == EXIT_ERROR
    assert "File not found" in captured.err
    assert f"==> {path} <==" in captured.out
    assert "offset: 18 (00000012)" in captured.out


def test_config_file_supplies_defaults(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = gzip_fixture(tmp_path)
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("line_width: 4\ncolor: false\n", encoding="utf-8")
    rc = main(["--config", str(cfg), "--first", "1f 8b 08", str(path)])
    lines = capsys.readouterr().out.splitlines()
    assert rc == EXIT_FOUND
    assert lines[1] == "00000010  00 00  1f 8b  |....|"
    assert lines[2] == "00000014  08 00  00 00  |....|"


def test_bad_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("context: 99\n", encoding="utf-8")
    rc = main(["--config", str(cfg), "00", str(gzip_fixture(tmp_path))])
    assert rc == EXIT_ERROR
    assert "context" in capsys.readouterr().err


@pytest.mark.parametrize("argv", [["-C", "11", "00", "f"], ["-w", "0", "00", "f"], ["00"]])
def test_usage_errors(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        main(argv)
    assert exc.value.code == 2


@pytest.mark.parametrize(
    "extra", [["--browse", "--first"], ["--browse"]], ids=["with-first", "two-files"]
)
def test_browse_rejects_ignored_options(
    tmp_path: Path, extra: list[str], capsys: pytest.CaptureFixture[str]
) -> None:
    path = str(gzip_fixture(tmp_path))
    files = [path, path] if extra == ["--browse"] else [path]
    with pytest.raises(SystemExit) as exc:
        main([*extra, "1f 8b 08", *files])
    assert exc.value.code == 2
    assert "--browse" in capsys.readouterr().err
