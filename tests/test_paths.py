"""Tests for xcdoctor.paths."""

from __future__ import annotations

from pathlib import Path

import pytest

from xcdoctor.graph import ObjectGraph
from xcdoctor.paths import (
    UnknownSourceTreeError,
    assemble_path,
    display_path,
    hierarchy_path,
    resolve_path,
)


def _graph(objects: dict) -> ObjectGraph:
    return ObjectGraph.from_document({"objects": objects})


def _file(path: str, source_tree: str = "<group>") -> dict:
    return {"isa": "PBXFileReference", "path": path, "sourceTree": source_tree}


def _group(children: list, path: str | None = None, source_tree: str = "<group>", name: str | None = None) -> dict:
    group = {"isa": "PBXGroup", "children": children, "sourceTree": source_tree}
    if path is not None:
        group["path"] = path
    if name is not None:
        group["name"] = name
    return group


def test_group_relative_path_without_ancestor_paths_is_unchanged() -> None:
    graph = _graph({"F": _file("main.txt"), "ROOT": _group(["F"])})

    assert assemble_path(graph.get("F"), graph) == "main.txt"


def test_group_relative_path_concatenates_ancestor_paths() -> None:
    graph = _graph(
        {
            "F": _file("icon.png"),
            "G2": _group(["F"], path="Images"),
            "G1": _group(["G2"], path="App"),
            "ROOT": _group(["G1"]),
        }
    )

    assert assemble_path(graph.get("F"), graph) == "App/Images/icon.png"


def test_pathless_groups_are_skipped() -> None:
    graph = _graph(
        {
            "F": _file("icon.png"),
            "G2": _group(["F"], name="Virtual"),
            "G1": _group(["G2"], path="App"),
        }
    )

    assert assemble_path(graph.get("F"), graph) == "App/icon.png"


def test_source_root_ancestor_stops_ascending() -> None:
    graph = _graph(
        {
            "F": _file("icon.png"),
            "G2": _group(["F"], path="Shared", source_tree="SOURCE_ROOT"),
            "G1": _group(["G2"], path="App"),
        }
    )

    assert assemble_path(graph.get("F"), graph) == "Shared/icon.png"


def test_absolute_ancestor_stops_ascending() -> None:
    graph = _graph(
        {
            "F": _file("icon.png"),
            "G2": _group(["F"], path="/opt/shared", source_tree="<absolute>"),
            "G1": _group(["G2"], path="App"),
        }
    )

    assert assemble_path(graph.get("F"), graph) == "/opt/shared/icon.png"


@pytest.mark.parametrize("source_tree", ["SOURCE_ROOT", "<absolute>"])
def test_verbatim_anchors_ignore_ancestors(source_tree: str) -> None:
    graph = _graph({"F": _file("Config/App.xcconfig", source_tree), "G": _group(["F"], path="App")})

    assert assemble_path(graph.get("F"), graph) == "Config/App.xcconfig"


@pytest.mark.parametrize("source_tree", ["", "SDKROOT", "DEVELOPER_DIR", "BUILT_PRODUCTS_DIR"])
def test_build_time_anchors_are_unresolvable(source_tree: str) -> None:
    graph = _graph({"F": _file("UIKit.framework", source_tree)})

    assert assemble_path(graph.get("F"), graph) is None


def test_missing_fields_are_unresolvable() -> None:
    graph = _graph(
        {
            "F1": {"isa": "PBXFileReference", "sourceTree": "<group>"},
            "F2": {"isa": "PBXFileReference", "path": "a.txt"},
        }
    )

    assert assemble_path(graph.get("F1"), graph) is None
    assert assemble_path(graph.get("F2"), graph) is None


def test_unknown_anchor_raises() -> None:
    graph = _graph({"F": _file("a.txt", "NOT_A_TREE")})

    with pytest.raises(UnknownSourceTreeError) as excinfo:
        assemble_path(graph.get("F"), graph)

    assert excinfo.value.source_tree == "NOT_A_TREE"


def test_unknown_ancestor_anchor_stops_ascending() -> None:
    graph = _graph(
        {
            "F": _file("a.txt"),
            "G2": _group(["F"], name="Shared", source_tree="MY_SOURCE_TREE"),
            "G1": _group(["G2"], path="App"),
        }
    )

    assert assemble_path(graph.get("F"), graph) == "a.txt"


@pytest.mark.parametrize("path", ["Platform", None])
def test_build_time_ancestor_stops_ascending(path: str | None) -> None:
    graph = _graph(
        {
            "F": _file("a.txt"),
            "G2": _group(["F"], path=path, name="Platform", source_tree="SDKROOT"),
            "G1": _group(["G2"], path="App"),
        }
    )

    assert assemble_path(graph.get("F"), graph) == "a.txt"


def test_resolve_path_anchors_relative_paths_at_root(tmp_path: Path) -> None:
    assert resolve_path("App/../main.txt", tmp_path) == tmp_path / "main.txt"
    assert resolve_path("/opt/shared/a.txt", tmp_path) == Path("/opt/shared/a.txt")


def test_display_path_is_relative_under_root(tmp_path: Path) -> None:
    assert display_path(tmp_path / "App" / "a.txt", tmp_path) == "App/a.txt"
    assert display_path(Path("/opt/a.txt"), tmp_path) == "/opt/a.txt"


def test_hierarchy_path_uses_names_over_paths() -> None:
    graph = _graph(
        {
            "ROOT": _group(["G1"]),
            "G1": _group(["G2"], path="App"),
            "G2": _group(["G3"], path="Sources", name="Code"),
            "G3": _group([], name="empty"),
        }
    )

    assert hierarchy_path(graph.get("G3"), graph) == "App/Code/empty"
