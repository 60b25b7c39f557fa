from __future__ import annotations

import io
import struct
from zipfile import ZIP_STORED, ZipFile

import pytest

from h5pbook.package.template import (
    CorruptTemplate,
    InvalidTemplate,
    MissingManifest,
    TemplateError,
    TemplatePackage,
)


def test_valid_template_returns_manifest(make_template) -> None:
    manifest = TemplatePackage.load(make_template()).validate()

    assert manifest.main_library == "H5P.InteractiveBook"
    assert manifest.title == "Template"
    assert ("H5P.Column", 1, 16) in [(dep.machine_name, dep.major, dep.minor) for dep in manifest.dependencies]


def test_missing_manifest_is_reported(make_template) -> None:
    package = TemplatePackage.load(make_template(include_manifest=False))

    with pytest.raises(MissingManifest) as excinfo:
        package.validate()

    assert "h5p.json missing" in str(excinfo.value)


def test_non_book_main_library_is_rejected(make_template) -> None:
    package = TemplatePackage.load(make_template(main_library="H5P.CoursePresentation"))

    with pytest.raises(InvalidTemplate) as excinfo:
        package.validate()

    assert "H5P.CoursePresentation" in str(excinfo.value)


def test_non_zip_bytes_are_corrupt() -> None:
    with pytest.raises(CorruptTemplate):
        TemplatePackage.load(b"definitely not a zip archive")


def test_unparseable_manifest_is_corrupt() -> None:
    buffer = io.BytesIO()
    with ZipFile(buffer, "w") as archive:
        archive.writestr("h5p.json", "{not json")

    with pytest.raises(CorruptTemplate):
        TemplatePackage.load(buffer.getvalue()).validate()


def test_template_errors_share_base_class() -> None:
    assert issubclass(MissingManifest, TemplateError)
    assert issubclass(InvalidTemplate, TemplateError)
    assert issubclass(CorruptTemplate, TemplateError)


def test_malformed_dependencies_are_skipped(make_template) -> None:
    buffer = io.BytesIO()
    with ZipFile(buffer, "w") as archive:
        archive.writestr(
            "h5p.json",
            '{"mainLibrary": "H5P.InteractiveBook", "preloadedDependencies": '
            '[{"machineName": "H5P.Column"}, {"machineName": "H5P.Image", "majorVersion": 1, "minorVersion": 1}]}',
        )

    manifest = TemplatePackage.load(buffer.getvalue()).validate()

    assert [dep.machine_name for dep in manifest.dependencies] == ["H5P.Image"]


def test_copy_is_independent_of_original(make_template) -> None:
    original = TemplatePackage.load(make_template())
    working = original.copy()

    working.write("content/content.json", b"{}")
    working.remove("content/")

    assert original.read("content/content.json") != b"{}"
    assert "content/" in original
    assert "content/" not in working


def _manifest_only_zip(manifest_json: str) -> bytes:
    buffer = io.BytesIO()
    with ZipFile(buffer, "w") as archive:
        archive.writestr("h5p.json", manifest_json)
    return buffer.getvalue()


@pytest.mark.parametrize(
    "dependencies_json",
    ["5", '"H5P.Column"', '{"machineName": "H5P.Column"}', '[5]', '["H5P.Column"]'],
)
def test_non_list_dependencies_are_corrupt(dependencies_json: str) -> None:
    data = _manifest_only_zip(
        '{"mainLibrary": "H5P.InteractiveBook", "preloadedDependencies": ' + dependencies_json + "}"
    )

    with pytest.raises(CorruptTemplate) as excinfo:
        TemplatePackage.load(data).validate()

    assert str(excinfo.value).startswith("Corrupt template file")


def _patch_stored_member(data: bytes, *, flags: int | None = None, method: int | None = None) -> bytes:
    patched = bytearray(data)
    local = patched.find(b"PK\x03\x04")
    central = patched.find(b"PK\x01\x02")
    if flags is not None:
        patched[local + 6 : local + 8] = struct.pack("<H", flags)
        patched[central + 8 : central + 10] = struct.pack("<H", flags)
    if method is not None:
        patched[local + 8 : local + 10] = struct.pack("<H", method)
        patched[central + 10 : central + 12] = struct.pack("<H", method)
    return bytes(patched)


@pytest.mark.parametrize(
    "patch",
    [{"method": 99}, {"flags": 0x1}],
    ids=["unsupported-compression", "encrypted-member"],
)
def test_unreadable_members_are_corrupt(patch: dict[str, int]) -> None:
    buffer = io.BytesIO()
    with ZipFile(buffer, "w", ZIP_STORED) as archive:
        archive.writestr("h5p.json", '{"mainLibrary": "H5P.InteractiveBook"}')

    with pytest.raises(CorruptTemplate):
        TemplatePackage.load(_patch_stored_member(buffer.getvalue(), **patch))
