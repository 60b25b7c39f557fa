from __future__ import annotations

import json
from pathlib import Path
from zipfile import ZipFile

import pytest

from h5pbook.cli.build_book import main as build_book_main
from h5pbook.cli.check_template import main as check_template_main


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch) -> None:
    for name in ("H5PBOOK_TEMPLATE_PATH", "H5PBOOK_OUTPUT_DIR", "H5PBOOK_COMPRESSION_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_build_cli_builds_directory_of_sources(make_template, tmp_path: Path, capsys) -> None:
    template = tmp_path / "template.h5p"
    template.write_bytes(make_template())
    sources = tmp_path / "sources"
    sources.mkdir()
    (sources / "one.md").write_text("# One\nBody\n", encoding="utf-8")
    (sources / "two.markdown").write_text("# Two\n[VIDEO]\n", encoding="utf-8")
    (sources / "notes.txt").write_text("# Ignored\n", encoding="utf-8")
    out_dir = tmp_path / "out"

    exit_code = build_book_main(
        ["--path", str(sources), "--template", str(template), "--output-dir", str(out_dir)]
    )
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["processed"] == 2
    assert payload["errors"] == []
    assert [result["chapters"] for result in payload["results"]] == [["One"], ["Two"]]
    assert sorted(path.name for path in out_dir.iterdir()) == ["one.h5p", "two.h5p"]
    with ZipFile(out_dir / "one.h5p") as archive:
        assert "content/content.json" in archive.namelist()


def test_build_cli_reports_source_errors(make_template, tmp_path: Path, capsys) -> None:
    template = tmp_path / "template.h5p"
    template.write_bytes(make_template())
    source = tmp_path / "empty.md"
    source.write_text("\n\n", encoding="utf-8")

    exit_code = build_book_main(["--path", str(source), "--template", str(template)])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert payload["processed"] == 0
    assert "No chapters found" in payload["errors"][0]["error"]
    assert not (tmp_path / "empty.h5p").exists()


def test_build_cli_rejects_invalid_template(make_template, tmp_path: Path, capsys) -> None:
    template = tmp_path / "presentation.h5p"
    template.write_bytes(make_template(main_library="H5P.CoursePresentation"))
    source = tmp_path / "book.md"
    source.write_text("# A\nx\n", encoding="utf-8")

    exit_code = build_book_main(["--path", str(source), "--template", str(template)])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert "not an Interactive Book" in payload["errors"][0]["error"]
    assert not (tmp_path / "book.h5p").exists()


def test_build_cli_uses_template_from_environment(make_template, tmp_path: Path, capsys, monkeypatch) -> None:
    template = tmp_path / "env-template.h5p"
    template.write_bytes(make_template())
    source = tmp_path / "book.md"
    source.write_text("# Env\nx\n", encoding="utf-8")
    monkeypatch.setenv("H5PBOOK_TEMPLATE_PATH", str(template))

    exit_code = build_book_main(["--path", str(source)])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["template"] == str(template)
    assert (tmp_path / "book.h5p").exists()


def test_check_template_cli_lists_libraries(make_template, tmp_path: Path, capsys) -> None:
    template = tmp_path / "template.h5p"
    template.write_bytes(
        make_template(dependencies=[("H5P.InteractiveBook", 1, 7), ("H5P.Column", 1, 16), ("H5P.Text", 1, 1)])
    )

    exit_code = check_template_main(["--template", str(template)])
    report = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert report["valid"] is True
    assert report["libraries"]["column"] == "H5P.Column 1.16"
    assert report["libraries"]["accordion"] is None
    assert report["is_advanced_text"] is False


def test_check_template_cli_reports_corrupt_archive(tmp_path: Path, capsys) -> None:
    template = tmp_path / "broken.h5p"
    template.write_bytes(b"not a zip")

    exit_code = check_template_main(["--template", str(template)])
    report = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert report["valid"] is False
    assert report["error"].startswith("Corrupt template file")


def test_check_template_cli_rejects_missing_core_libraries(make_template, tmp_path: Path, capsys) -> None:
    template = tmp_path / "bare.h5p"
    template.write_bytes(make_template(dependencies=[("H5P.InteractiveBook", 1, 7)]))

    exit_code = check_template_main(["--template", str(template)])
    report = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert report["valid"] is False
    assert report["error"] == "Template lacks required libraries: column, text"
    assert report["libraries"]["column"] is None
    assert report["libraries"]["text"] is None


def test_check_template_cli_reads_template_from_environment(make_template, tmp_path: Path, capsys, monkeypatch) -> None:
    template = tmp_path / "env-template.h5p"
    template.write_bytes(make_template())
    monkeypatch.setenv("H5PBOOK_TEMPLATE_PATH", str(template))

    exit_code = check_template_main([])
    report = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert report["template"] == str(template)
    assert report["valid"] is True


def test_build_cli_reports_corrupt_manifest(tmp_path: Path, capsys) -> None:
    template = tmp_path / "odd.h5p"
    with ZipFile(template, "w") as archive:
        archive.writestr("h5p.json", '{"mainLibrary": "H5P.InteractiveBook", "preloadedDependencies": 5}')
    source = tmp_path / "book.md"
    source.write_text("# A\nx\n", encoding="utf-8")

    exit_code = build_book_main(["--path", str(source), "--template", str(template)])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert payload["errors"][0]["error"] == "Corrupt template file: preloadedDependencies is not a list"
