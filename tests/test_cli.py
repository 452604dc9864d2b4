"""CLI parser and command behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from mergegen.cli import _build_parser, main, parse_rekeys
from mergegen.signing import SIGNATURE_PLACEHOLDER

BEGIN = "BEGIN-MANUAL-SECTION"
END = "END-MANUAL-SECTION"


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "validate", "a.java"])
    assert args.verbose is True
    assert args.command == "validate"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["merge", "gen.java", "out.java", "--verbose"])
    assert args.verbose is True
    assert args.command == "merge"


def test_cli_collects_repeated_rekeys_and_dry_run() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["merge", "gen", "out", "--rekey", "a=b", "--rekey", "c=d,e", "--dry-run"]
    )
    assert args.rekey == ["a=b", "c=d,e"]
    assert args.dry_run is True


def test_parse_rekeys() -> None:
    assert parse_rekeys(["new=old", "combined=x, y", "new=older"]) == {
        "new": ["old", "older"],
        "combined": ["x", "y"],
    }


@pytest.mark.parametrize("value", ["noequals", "=old", "new=", "new= , "])
def test_parse_rekeys_rejects_malformed_values(value: str) -> None:
    with pytest.raises(ValueError):
        parse_rekeys([value])


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_merge_command_writes_target(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    generated = _write(tmp_path / "gen.java", f"v2\n{BEGIN} renamed\nstub\n{END}\n")
    target = _write(tmp_path / "out.java", f"v1\n{BEGIN} original\nmine\n{END}\n")

    main(["merge", str(generated), str(target), "--rekey", "renamed=original"])

    assert target.read_text(encoding="utf-8") == f"v2\n{BEGIN} renamed\nmine\n{END}\n"
    assert "out.java updated" in capsys.readouterr().out


def test_merge_command_dry_run_prints_diff(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    generated = _write(tmp_path / "gen.txt", "new\n")
    target = _write(tmp_path / "out.txt", "old\n")

    main(["merge", str(generated), str(target), "--dry-run"])

    out = capsys.readouterr().out
    assert "changes (dry-run)" in out
    assert "+new" in out
    assert target.read_text(encoding="utf-8") == "old\n"


def test_merge_command_reports_parse_errors(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    generated = _write(tmp_path / "gen.txt", "new\n")
    target = _write(tmp_path / "out.txt", f"{BEGIN} open\n")

    with pytest.raises(SystemExit) as excinfo:
        main(["merge", str(generated), str(target)])

    assert excinfo.value.code == 1
    assert "missing its end marker" in capsys.readouterr().err


def test_merge_command_rejects_bad_rekey(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    generated = _write(tmp_path / "gen.txt", "new\n")

    with pytest.raises(SystemExit) as excinfo:
        main(["merge", str(generated), str(tmp_path / "out.txt"), "--rekey", "broken"])

    assert excinfo.value.code == 2


def test_check_command_exit_status(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    generated = _write(tmp_path / "gen.txt", "same\n")
    target = _write(tmp_path / "out.txt", "same\n")

    main(["check", str(generated), str(target)])
    assert "is up to date" in capsys.readouterr().out

    _write(generated, "changed\n")
    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(generated), str(target)])
    assert excinfo.value.code == 1


def test_extract_command_prints_generated_code(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    path = _write(tmp_path / "out.txt", f"a\n{BEGIN} f\nmine\n{END}\nb")

    main(["extract", str(path)])

    assert capsys.readouterr().out == f"a\n{BEGIN} f\n{END}\nb"


def test_extract_command_keeps_trailing_newline_exact(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    path = _write(tmp_path / "out.txt", f"a\n{BEGIN} f\nmine\n{END}\n")

    main(["extract", str(path)])

    assert capsys.readouterr().out == f"a\n{BEGIN} f\n{END}\n"


def test_validate_command(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    good = _write(tmp_path / "good.txt", f"{BEGIN} f\n{END}\n")
    bad = _write(tmp_path / "bad.txt", f"{BEGIN} f\n{BEGIN} g\n{END}\n")

    main(["validate", str(good)])
    assert "good.txt: ok" in capsys.readouterr().out

    with pytest.raises(SystemExit) as excinfo:
        main(["validate", str(good), str(bad)])
    assert excinfo.value.code == 1
    assert "line 2" in capsys.readouterr().err


def test_config_option_selects_marker_style(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    _write(tmp_path / ".mergegen.yml", "markers:\n  style: hash\n")
    path = _write(tmp_path / "mod.py", "x = 1\n# BEGIN-MANUAL-SECTION f\nmine\n# END-MANUAL-SECTION")

    main(["extract", str(path), "--config", str(tmp_path)])

    assert "mine" not in capsys.readouterr().out


def test_sign_and_verify_commands(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    path = _write(
        tmp_path / "User.php",
        f"// {SIGNATURE_PLACEHOLDER}\nclass User {{\n{BEGIN} User:body\n{END}\n}}\n",
    )

    main(["sign", str(path)])
    assert "User.php: signed" in capsys.readouterr().out

    main(["verify", str(path)])
    assert "User.php: valid" in capsys.readouterr().out

    with path.open("a", encoding="utf-8") as handle:
        handle.write("\n")
    with pytest.raises(SystemExit) as excinfo:
        main(["verify", str(path)])
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert "User.php: invalid" in captured.out
    assert "failed signature verification" in captured.err


def test_sign_command_without_placeholder_fails(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    path = _write(tmp_path / "plain.txt", "no token\n")

    with pytest.raises(SystemExit) as excinfo:
        main(["sign", str(path)])

    assert excinfo.value.code == 1
    assert "exactly one signature token" in capsys.readouterr().err
