"""Tests for xcdoctor.plist."""

from __future__ import annotations

import plistlib
from pathlib import Path

import pytest

from xcdoctor import plist

OPENSTEP_PROJECT = """// !$*UTF8*$!
{
	archiveVersion = 1;
	classes = {
	};
	objectVersion = 50;
	objects = {
		0A0000000000000000000001 /* main.swift */ = {isa = PBXFileReference; lastKnownFileType = sourcecode.swift; path = main.swift; sourceTree = "<group>"; };
		0A0000000000000000000002 = {
			isa = PBXGroup;
			children = (
				0A0000000000000000000001 /* main.swift */,
			);
			sourceTree = "<group>";
		};
	};
	rootObject = 0A0000000000000000000002 /* Project object */;
}
"""


def test_detect_format_recognises_each_variant() -> None:
    assert plist.detect_format(plistlib.dumps({"a": 1})) == "xml"
    assert plist.detect_format(plistlib.dumps({"a": 1}, fmt=plistlib.FMT_BINARY)) == "binary"
    assert plist.detect_format(OPENSTEP_PROJECT.encode("utf-8")) == "openstep"


def test_loads_openstep_project_document() -> None:
    document = plist.loads(OPENSTEP_PROJECT.encode("utf-8"))

    objects = document["objects"]
    assert objects["0A0000000000000000000001"]["path"] == "main.swift"
    assert objects["0A0000000000000000000002"]["children"] == ["0A0000000000000000000001"]


def test_loads_xml_and_binary_to_the_same_tree() -> None:
    tree = {"objects": {"A": {"isa": "PBXGroup", "children": ["B"]}}}

    assert plist.loads(plistlib.dumps(tree)) == tree
    assert plist.loads(plistlib.dumps(tree, fmt=plistlib.FMT_BINARY)) == tree


def test_truncated_xml_reports_parser_message() -> None:
    data = plistlib.dumps({"CFBundleName": "App"})[:-20]

    with pytest.raises(plist.PropertyListError) as excinfo:
        plist.loads(data)

    assert str(excinfo.value)


def test_empty_data_is_rejected() -> None:
    with pytest.raises(plist.PropertyListError, match="empty"):
        plist.loads(b"  \n")


def test_load_reads_from_disk(tmp_path: Path) -> None:
    target = tmp_path / "Info.plist"
    target.write_bytes(plistlib.dumps({"CFBundleName": "App"}))

    assert plist.load(target) == {"CFBundleName": "App"}
