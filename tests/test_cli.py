"""CLI parser and output tests."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from tests._fixtures.project_builder import ProjectBuilder
from xcdoctor.cli import DiagnosticWriter, _build_parser, main, supports_color
from xcdoctor.diagnosis import Defect, diagnose


class FakeTerminal(io.StringIO):
    def isatty(self) -> bool:
        return True


def test_cli_defaults_to_current_directory() -> None:
    parser = _build_parser()
    args = parser.parse_args([])
    assert args.path == "."
    assert args.verbose is False
    assert args.keep_comments is None
    assert args.defects is None


def test_cli_accepts_repeated_defects_and_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["App.xcodeproj", "--defect", "empty_groups", "--defect", "dangling_files", "-v", "--keep-comments"]
    )
    assert args.path == "App.xcodeproj"
    assert args.defects == ["empty_groups", "dangling_files"]
    assert args.verbose is True
    assert args.keep_comments is True


def test_cli_rejects_unknown_defect() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["--defect", "everything"])


def test_main_prints_diagnoses(project_builder: ProjectBuilder, capsys) -> None:
    project_builder.file("main.txt")
    project_builder.save()

    main([str(project_builder.root)])

    captured = capsys.readouterr()
    assert captured.out.splitlines() == [
        "main.txt",
        "doctor: 1 non-existent file is referenced",
    ]
    assert "not present on the file system" in captured.err


def test_main_prints_nothing_for_healthy_project(project_builder: ProjectBuilder, capsys) -> None:
    source = project_builder.file("main.swift")
    project_builder.write("main.swift", "print(1)\n")
    project_builder.target("App", sources=[source])
    project_builder.save()

    main([str(project_builder.bundle)])

    assert capsys.readouterr().out == ""


def test_main_reports_verbose_progress(project_builder: ProjectBuilder, capsys) -> None:
    project_builder.save()

    main([str(project_builder.root), "--verbose", "--defect", "empty_groups"])

    err = capsys.readouterr().err
    assert "Opening App.xcodeproj ..." in err
    assert "Evaluating App.xcodeproj ..." in err
    assert "Examining for empty_groups ..." in err


def test_main_tolerates_unknown_configured_defects(project_builder: ProjectBuilder, capsys) -> None:
    project_builder.file("main.txt")
    project_builder.write(".xcdoctor.yml", "defects:\n  enabled: [not_a_defect]\n")
    project_builder.save()

    main([str(project_builder.bundle)])

    captured = capsys.readouterr()
    assert "doctor: 1 non-existent file is referenced" in captured.out
    assert "not_a_defect" in captured.err


def test_main_exits_when_no_project_is_found(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path)])

    assert excinfo.value.code == 1
    assert "no Xcode project found" in capsys.readouterr().err


def test_main_exits_for_ambiguous_directory(tmp_path: Path, capsys) -> None:
    (tmp_path / "A.xcodeproj").mkdir()
    (tmp_path / "B.xcodeproj").mkdir()

    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path)])

    assert excinfo.value.code == 1
    assert "A.xcodeproj, B.xcodeproj" in capsys.readouterr().err


def test_main_writes_log_file(project_builder: ProjectBuilder, tmp_path: Path) -> None:
    project_builder.save()
    log_file = tmp_path / "xcdoctor.log"

    main([str(project_builder.root), "--log-file", str(log_file)])

    assert "Opening" in log_file.read_text(encoding="utf-8")


def test_colors_require_a_capable_terminal(monkeypatch) -> None:
    monkeypatch.setenv("TERM", "xterm-256color")
    assert supports_color(FakeTerminal())
    assert not supports_color(io.StringIO())

    monkeypatch.setenv("TERM", "dumb")
    assert not supports_color(FakeTerminal())

    monkeypatch.delenv("TERM")
    assert not supports_color(FakeTerminal())


def test_writer_colors_notes_and_conclusions(monkeypatch) -> None:
    monkeypatch.setenv("TERM", "xterm")
    out, err = FakeTerminal(), io.StringIO()
    writer = DiagnosticWriter(out=out, err=err)
    diagnosis = diagnose(Defect.EMPTY_GROUPS, ["App/a"])
    assert diagnosis is not None

    writer.diagnosis(diagnosis)

    assert out.getvalue() == (
        "\x1b[0;33mApp/a\x1b[0m\n"
        "\x1b[0;31mdoctor: 1 empty group found\x1b[0m\n"
    )
    assert err.getvalue().startswith("These groups contain zero children")


def test_progress_is_silent_without_a_terminal() -> None:
    err = io.StringIO()
    DiagnosticWriter(out=io.StringIO(), err=err).progress(1, 2, "a.swift")
    assert err.getvalue() == ""
