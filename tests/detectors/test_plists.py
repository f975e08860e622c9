"""Tests for the corrupt property list detector."""

from __future__ import annotations

import plistlib

from tests._fixtures.project_builder import ProjectBuilder
from xcdoctor.detectors.plists import CorruptPropertyListsDetector


def test_truncated_plist_is_reported_with_parser_message(project_builder: ProjectBuilder) -> None:
    project_builder.file("Broken.plist", kind="text.plist.xml")
    project_builder.file("Valid.plist")
    project_builder.file("Missing.plist")
    project_builder.write_bytes("Broken.plist", plistlib.dumps({"CFBundleName": "App"})[:-24])
    project_builder.write_bytes("Valid.plist", plistlib.dumps({"CFBundleName": "App"}))

    cases = CorruptPropertyListsDetector().detect(project_builder.open())

    assert len(cases) == 1
    path, _, message = cases[0].partition(": ")
    assert path == "Broken.plist"
    assert message


def test_progress_is_reported_per_plist(project_builder: ProjectBuilder) -> None:
    project_builder.file("A.plist")
    project_builder.file("B.plist")
    project_builder.write_bytes("A.plist", plistlib.dumps({}))
    project_builder.write_bytes("B.plist", plistlib.dumps({}))
    ticks: list[tuple[int, int]] = []

    CorruptPropertyListsDetector().detect(
        project_builder.open(), lambda n, total, label: ticks.append((n, total))
    )

    assert ticks == [(1, 2), (2, 2), (2, 2)]
