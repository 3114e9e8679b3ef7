"""CLI behaviour tests."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from empd import __version__
from empd.cli import CONFIG_ERROR_EXIT_CODE, FATAL_EXIT_CODE, _build_parser, main, run


def test_cli_requires_a_path() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit) as excinfo:
        parser.parse_args([])
    assert excinfo.value.code == 2


def test_cli_accepts_short_and_long_delete_flag() -> None:
    parser = _build_parser()
    assert parser.parse_args(["-d", "x"]).delete_if_empty is True
    assert parser.parse_args(["--delete-if-empty", "x"]).delete_if_empty is True
    assert parser.parse_args(["x"]).delete_if_empty is False


def test_cli_accepts_verbose_and_log_file(tmp_path: Path) -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "--log-file", str(tmp_path / "empd.log"), "target"])
    assert args.verbose is True
    assert args.log_file == tmp_path / "empd.log"
    assert args.path == "target"


def test_cli_prints_version(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run(["--version"])
    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_run_returns_zero_for_empty_directory(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "empty").mkdir()
    out, err = io.StringIO(), io.StringIO()

    code = run(["empty"], stdout=out, stderr=err)

    assert code == 0
    assert "is an empty directory" in out.getvalue()
    assert "Exiting with non-zero exit code" not in err.getvalue()


def test_run_reports_missing_path(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    out, err = io.StringIO(), io.StringIO()

    code = run(["missing"], stdout=out, stderr=err)

    assert code == 11
    assert 'Path "missing" does not exist' in err.getvalue()
    assert "Exiting with non-zero exit code 11" in err.getvalue()
    assert out.getvalue() == ""


def test_run_reports_non_empty_directory(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "full").mkdir()
    (tmp_path / "full" / "a.txt").write_text("a", encoding="utf-8")
    err = io.StringIO()

    code = run(["full"], stdout=io.StringIO(), stderr=err)

    assert code == 31
    assert "Exiting with non-zero exit code 31" in err.getvalue()


def test_run_deletes_after_confirmation(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "empty.txt").touch()

    code = run(
        ["--delete-if-empty", "empty.txt"],
        stdin=io.StringIO("y\n"),
        stdout=io.StringIO(),
        stderr=io.StringIO(),
    )

    assert code == 0
    assert not (tmp_path / "empty.txt").exists()


def test_run_declined_returns_declined_code(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "empty.txt").touch()

    code = run(
        ["-d", "empty.txt"],
        stdin=io.StringIO("no\n"),
        stdout=io.StringIO(),
        stderr=io.StringIO(),
    )

    assert code == 22
    assert (tmp_path / "empty.txt").exists()


def test_run_reads_delete_default_from_config(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".empd.yml").write_text("delete_if_empty: true\n", encoding="utf-8")
    (tmp_path / "empty").mkdir()
    err = io.StringIO()

    code = run(["empty"], stdin=io.StringIO("n\n"), stdout=io.StringIO(), stderr=err)

    assert code == 32
    assert "Are you sure you want to delete empty directory" in err.getvalue()


def test_run_uses_explicit_config_path(tmp_path: Path, monkeypatch) -> None:
    config_dir = tmp_path / "conf"
    config_dir.mkdir()
    (config_dir / ".empd.yml").write_text(
        "verbose: yes\nlog_file: empd.log\n", encoding="utf-8"
    )
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    (work / "empty.txt").touch()

    code = run(
        ["--config", str(config_dir), "empty.txt"],
        stdout=io.StringIO(),
        stderr=io.StringIO(),
    )

    assert code == 0
    log_text = (config_dir / "empd.log").read_text(encoding="utf-8")
    assert "Canonicalized input path" in log_text


def test_run_reports_invalid_config(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".empd.yml").write_text("- just\n- a list\n", encoding="utf-8")
    err = io.StringIO()

    code = run(["anything"], stdout=io.StringIO(), stderr=err)

    assert code == CONFIG_ERROR_EXIT_CODE
    assert "empd: .empd.yml must contain a mapping at the root" in err.getvalue()
    assert f"Exiting with non-zero exit code {CONFIG_ERROR_EXIT_CODE}" in err.getvalue()


def test_run_reports_unopenable_log_file(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "empty").mkdir()
    err = io.StringIO()

    code = run(
        ["--log-file", str(tmp_path / "no" / "dir" / "empd.log"), "empty"],
        stdout=io.StringIO(),
        stderr=err,
    )

    assert code == CONFIG_ERROR_EXIT_CODE
    assert "empd: Could not open log file" in err.getvalue()
    assert f"Exiting with non-zero exit code {CONFIG_ERROR_EXIT_CODE}" in err.getvalue()
    assert (tmp_path / "empty").is_dir()


def test_run_sends_log_records_to_given_stderr(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "empty").mkdir()
    out, err = io.StringIO(), io.StringIO()

    code = run(["empty"], stdout=out, stderr=err)

    assert code == 0
    assert "[empd] INFO Canonicalized input path" in err.getvalue()
    assert "Canonicalized" not in out.getvalue()
    assert capsys.readouterr().err == ""


def test_run_turns_fatal_errors_into_exit_code(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    err = io.StringIO()

    code = run(["bad-\udcff-name"], stdout=io.StringIO(), stderr=err)

    assert code == FATAL_EXIT_CODE
    assert "empd: Could not convert path to a UTF-8 string" in err.getvalue()
    assert f"Exiting with non-zero exit code {FATAL_EXIT_CODE}" in err.getvalue()


def test_main_exits_with_run_code(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        main(["missing"])

    assert excinfo.value.code == 11
    assert 'Path "missing" does not exist' in capsys.readouterr().err
