"""Tests for the empty asset detector."""

from __future__ import annotations

import json

from tests._fixtures.project_builder import ProjectBuilder
from xcdoctor.detectors.assets import EmptyAssetsDetector

RED = {"colors": [{"idiom": "universal", "color": {"components": {"red": "1.000"}}}]}
NO_COMPONENTS = {"colors": [{"idiom": "universal"}]}


def _catalog(project_builder: ProjectBuilder) -> None:
    project_builder.file("Assets.xcassets")
    project_builder.asset("Assets.xcassets")


def test_asset_with_only_metadata_is_empty(project_builder: ProjectBuilder) -> None:
    _catalog(project_builder)
    project_builder.asset("Assets.xcassets/Logo.imageset", files=["logo.png"])
    project_builder.asset("Assets.xcassets/Missing.imageset")

    project = project_builder.open()

    assert EmptyAssetsDetector().detect(project) == ["Assets.xcassets/Missing.imageset"]


def test_hidden_entries_do_not_count(project_builder: ProjectBuilder) -> None:
    _catalog(project_builder)
    directory = project_builder.asset("Assets.xcassets/Ghost.imageset")
    (directory / ".DS_Store").write_bytes(b"\x00")

    project = project_builder.open()

    assert EmptyAssetsDetector().detect(project) == ["Assets.xcassets/Ghost.imageset"]


def test_color_sets_are_judged_by_components(project_builder: ProjectBuilder) -> None:
    _catalog(project_builder)
    project_builder.asset("Assets.xcassets/Red.colorset", json.dumps(RED))
    project_builder.asset("Assets.xcassets/Blank.colorset", json.dumps(NO_COMPONENTS))
    project_builder.asset("Assets.xcassets/Bare.colorset")

    project = project_builder.open()

    assert sorted(EmptyAssetsDetector().detect(project)) == [
        "Assets.xcassets/Bare.colorset",
        "Assets.xcassets/Blank.colorset",
    ]


def test_unreadable_color_metadata_is_not_reported(project_builder: ProjectBuilder) -> None:
    _catalog(project_builder)
    project_builder.asset("Assets.xcassets/Broken.colorset", "{not json")

    project = project_builder.open()

    assert EmptyAssetsDetector().detect(project) == []


def test_catalog_not_on_disk_is_skipped(project_builder: ProjectBuilder) -> None:
    project_builder.file("Assets.xcassets")

    project = project_builder.open()

    assert EmptyAssetsDetector().detect(project) == []


def test_progress_ticks_once_per_asset_and_at_completion(project_builder: ProjectBuilder) -> None:
    _catalog(project_builder)
    project_builder.asset("Assets.xcassets/A.imageset", files=["a.png"])
    project_builder.asset("Assets.xcassets/B.imageset", files=["b.png"])
    ticks: list[tuple[int, int, str | None]] = []

    EmptyAssetsDetector().detect(
        project_builder.open(), lambda n, total, label: ticks.append((n, total, label))
    )

    assert ticks == [(1, 2, "A.imageset"), (2, 2, "B.imageset"), (2, 2, None)]
