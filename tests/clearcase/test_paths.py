"""Tests for the extended path model."""

from __future__ import annotations

import pytest

from ccview.clearcase.errors import MalformedPathError, MalformedVersionError
from ccview.clearcase.paths import (
    PathElement,
    ViewPath,
    extract_element_path,
    insert_dots,
    is_inside_view,
    is_numeric,
    join_path,
    last_branch,
    normalize_file_name,
    normalize_path,
    path_without_versions,
    relative_path_with_versions,
    remove_unneeded_dots,
    replace_last_version,
    split_path,
    split_path_in_view,
    version_number,
)


class TestSplitPath:
    """split_path tokenization."""

    def test_versions_attach_to_elements(self) -> None:
        elements = split_path("/vobs/proj@@/main/3/src/a.c@@/main/rel/2")

        assert [e.name for e in elements] == ["", "vobs", "proj", "src", "a.c"]
        assert [e.version for e in elements] == [None, None, "@@/main/3", None, "@@/main/rel/2"]
        assert elements[4].version_path == "/main/rel/2"

    def test_version_without_number_swallows_rest(self) -> None:
        elements = split_path("/vobs/a.c@@/main/rel")

        assert elements[-1].name == "a.c"
        assert elements[-1].version == "@@/main/rel"

    def test_main_segment_opens_version_when_enabled(self) -> None:
        elements = split_path("/vobs/proj/main/3/a.c")

        assert [str(e) for e in elements] == ["", "vobs", "proj@@/main/3", "a.c"]

    def test_main_segment_is_plain_when_disabled(self) -> None:
        elements = split_path("/vobs/proj/main/3/a.c", treat_main_as_version=False)

        assert [e.name for e in elements] == ["", "vobs", "proj", "main", "3", "a.c"]
        assert all(e.version is None for e in elements)

    def test_dot_element_folds_into_parent(self) -> None:
        elements = split_path("/vobs/dir/.@@/main/2/a.c")

        assert [str(e) for e in elements] == ["", "vobs", "dir@@/main/2", "a.c"]

    @pytest.mark.parametrize(
        "path",
        [
            "/vobs/a.c",
            "/vobs/proj@@/main/3/src/a.c@@/main/rel/2",
            "/vobs/a.c@@/main/rel",
            "relative/dir@@/main/0/file.txt",
            "/vobs/main/3/a.c",
        ],
    )
    def test_join_reconstructs_path(self, path: str) -> None:
        """Split then join with versions gives the normalized path back."""
        elements = split_path(path, treat_main_as_version=False)

        assert join_path(elements) == path


class TestJoinPath:
    def test_without_versions(self) -> None:
        elements = split_path("/vobs/proj@@/main/3/a.c@@/main/1")

        assert join_path(elements, include_versions=False) == "/vobs/proj/a.c"
        assert path_without_versions(elements) == "/vobs/proj/a.c"

    def test_range(self) -> None:
        elements = split_path("/vobs/proj@@/main/3/src/a.c")

        assert join_path(elements, 0, 3) == "/vobs/proj@@/main/3"
        assert join_path(elements, 3) == "src/a.c"

    def test_extract_element_path(self) -> None:
        assert extract_element_path("/vobs/a.c@@/main/2") == "/vobs/a.c"
        assert extract_element_path("/vobs/a.c/main/2") == "/vobs/a.c"

    def test_remove_unneeded_dots(self) -> None:
        assert remove_unneeded_dots("/vobs/dir/.@@/main/4") == "/vobs/dir@@/main/4"


class TestPathElement:
    def test_set_version_adds_marker(self) -> None:
        element = PathElement("a.c")
        element.set_version("/main/2")

        assert element.version == "@@/main/2"
        assert str(element) == "a.c@@/main/2"

    def test_set_version_keeps_marker(self) -> None:
        element = PathElement("a.c")
        element.set_version("@@/main/rel/0")

        assert element.version_path == "/main/rel/0"

    def test_set_version_none_clears(self) -> None:
        element = PathElement("a.c", "@@/main/2")
        element.set_version(None)

        assert str(element) == "a.c"


class TestTokens:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [("0", True), ("42", True), ("", False), ("LATEST", False), ("-1", False), ("１", False)],
    )
    def test_is_numeric(self, token: str, expected: bool) -> None:
        assert is_numeric(token) is expected

    def test_version_number(self) -> None:
        assert version_number("/main/rel/4") == 4
        assert version_number("main/0") == 0

    def test_version_number_rejects_labels(self) -> None:
        with pytest.raises(MalformedVersionError):
            version_number("/main/LATEST")

    def test_last_branch(self) -> None:
        assert last_branch("/main/rel/4") == "rel"
        assert last_branch("/main/0") == "main"

    def test_last_branch_requires_branch(self) -> None:
        with pytest.raises(MalformedVersionError):
            last_branch("4")


class TestViewMembership:
    def test_split_in_view_marks_view_elements(self) -> None:
        elements = split_path_in_view("/view/vob/src/a.c", "/view/vob")

        assert [e.from_view_path for e in elements] == [True, True, True, False, False]
        assert relative_path_with_versions(elements) == "src/a.c"

    def test_skip_at_end_keeps_view_tail(self) -> None:
        elements = split_path_in_view("/view/vob/src/a.c", "/view/vob", skip_at_end=1)

        assert relative_path_with_versions(elements) == "vob/src/a.c"

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/view/vob/a.c", True),
            ("/view/vob@@/main/2/a.c@@/main/1", True),
            ("/view/vob", True),
            ("/view/other/a.c", False),
            ("/view", False),
        ],
    )
    def test_is_inside_view(self, path: str, expected: bool) -> None:
        assert is_inside_view(path, "/view/vob") is expected


class TestReplaceLastVersion:
    def test_replaces_existing(self) -> None:
        assert replace_last_version("/vobs/a.c@@/main/2", "/main/rel/1") == "/vobs/a.c@@/main/rel/1"

    def test_adds_missing(self) -> None:
        assert replace_last_version("/vobs/a.c", "@@/main/1") == "/vobs/a.c@@/main/1"


class TestInsertDots:
    def test_directory_version_moves_to_dot(self) -> None:
        assert insert_dots("/vobs/dir@@/main/3/f.c", is_directory=False) == "/vobs/dir/.@@/main/3/f.c"

    def test_last_directory_element(self) -> None:
        assert insert_dots("/vobs/dir@@/main/3", is_directory=True) == "/vobs/dir/.@@/main/3"

    def test_file_version_stays(self) -> None:
        assert insert_dots("/vobs/f.c@@/main/2", is_directory=False) == "/vobs/f.c@@/main/2"

    def test_plain_path_unchanged(self) -> None:
        assert insert_dots("/vobs/dir", is_directory=True) == "/vobs/dir"


class TestNormalization:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("\\vobs\\a\\..\\b\\", "/vobs/b"),
            ("  /vobs/./a  ", "/vobs/a"),
            ("a//b", "a/b"),
            ("./a", "a"),
            ("/", "/"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_normalize_path(self, path: str | None, expected: str) -> None:
        assert normalize_path(path) == expected

    def test_parent_above_root_rejected(self) -> None:
        with pytest.raises(MalformedPathError, match="parent links"):
            normalize_file_name("/a/../..")

    def test_required_empty_rejected(self) -> None:
        with pytest.raises(MalformedPathError):
            normalize_path("   ", required=True)


class TestViewPath:
    def test_whole_path_joins_root_and_relative(self) -> None:
        view = ViewPath("/views/dev/", "vob\\proj")

        assert view.view_root == "/views/dev"
        assert view.relative_path == "vob/proj"
        assert view.whole_path == "/views/dev/vob/proj"
        assert str(view) == "/views/dev/vob/proj"

    def test_no_relative_path(self) -> None:
        assert ViewPath("/views/dev").whole_path == "/views/dev"
