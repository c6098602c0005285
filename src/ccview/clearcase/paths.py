"""Extended path model: element names carrying embedded version suffixes.

An extended path such as ``/vobs/proj@@/main/3/src/a.c@@/main/rel/2`` is a
sequence of elements, each optionally selected at a version. ``split_path``
turns the string into ``PathElement`` objects and ``join_path`` turns them
back into a string, with or without the version suffixes.

All paths are handled with ``/`` as separator; backslashes are converted
by ``normalize_path``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from ccview.clearcase.errors import MalformedPathError, MalformedVersionError
from ccview.config.constants import MAIN_BRANCH, PATH_SEPARATOR, VERSION_SEPARATOR


@dataclass(slots=True)
class PathElement:
    """One path segment and the version suffix it was selected at."""

    name: str
    version: str | None = None
    from_view_path: bool = False

    def append_version(self, part: str) -> None:
        self.version = (self.version or VERSION_SEPARATOR) + PATH_SEPARATOR + part

    def set_version(self, version: str | None) -> None:
        """Set the suffix; a bare ``/main/3`` gets the ``@@`` marker prepended."""
        if version is None or version.startswith(VERSION_SEPARATOR):
            self.version = version
        else:
            self.version = VERSION_SEPARATOR + version

    @property
    def version_path(self) -> str | None:
        """Version without the ``@@`` marker (``/main/3``)."""
        if self.version is None:
            return None
        return self.version[len(VERSION_SEPARATOR) :]

    def __str__(self) -> str:
        return self.name + (self.version or "")


@dataclass(frozen=True, slots=True)
class ViewPath:
    """A view root plus the path of the tracked directory within it."""

    view_root: str
    relative_path: str = ""
    whole_path: str = field(init=False)

    def __post_init__(self) -> None:
        root = normalize_path(self.view_root.strip())
        relative = normalize_path(self.relative_path.strip()).lstrip(PATH_SEPARATOR)
        whole = normalize_path(f"{root}{PATH_SEPARATOR}{relative}" if relative else root)
        object.__setattr__(self, "view_root", root)
        object.__setattr__(self, "relative_path", relative)
        object.__setattr__(self, "whole_path", whole)

    def __str__(self) -> str:
        return self.whole_path


# =============================================================================
# Token Helpers
# =============================================================================


def is_numeric(token: str) -> bool:
    """True for a non-empty run of ASCII digits."""
    return token.isascii() and token.isdigit()


def version_number(whole_version: str) -> int:
    """Ordinal of a version string (``/main/rel/4`` -> 4)."""
    last = whole_version.rstrip(PATH_SEPARATOR).rsplit(PATH_SEPARATOR, 1)[-1]
    if not is_numeric(last):
        raise MalformedVersionError(whole_version, "does not end with a version number")
    return int(last)


def last_branch(whole_version: str) -> str:
    """Innermost branch of a version string (``/main/rel/4`` -> ``rel``)."""
    parts = [p for p in whole_version.split(PATH_SEPARATOR) if p]
    if len(parts) < 2:
        raise MalformedVersionError(whole_version, "expected branch/.../N")
    return parts[-2]


# =============================================================================
# Split / Join
# =============================================================================


def split_path(path: str, *, treat_main_as_version: bool = True) -> list[PathElement]:
    """Split an extended path into elements.

    A segment ending in ``@@`` opens a version suffix that swallows the
    following segments up to and including the first numeric one. With
    ``treat_main_as_version`` a segment followed by a bare ``main`` segment
    opens a suffix the same way. ``.`` segments are folded into the
    preceding element.
    """
    segments = path.split(PATH_SEPARATOR)
    elements: list[PathElement] = []
    index = 0
    while index < len(segments):
        segment = segments[index]
        if segment.endswith(VERSION_SEPARATOR):
            element = PathElement(segment[: -len(VERSION_SEPARATOR)], VERSION_SEPARATOR)
            index = _consume_version(element, segments, index)
        elif (
            treat_main_as_version
            and index + 1 < len(segments)
            and segments[index + 1].lower() == MAIN_BRANCH
        ):
            element = PathElement(segment, VERSION_SEPARATOR)
            index = _consume_version(element, segments, index)
        else:
            element = PathElement(segment)
        elements.append(element)
        index += 1
    return _fold_dots(elements)


def _consume_version(element: PathElement, segments: Sequence[str], index: int) -> int:
    index += 1
    while index < len(segments):
        element.append_version(segments[index])
        if is_numeric(segments[index]):
            break
        index += 1
    return index


def _fold_dots(elements: list[PathElement]) -> list[PathElement]:
    if not elements:
        return elements
    result = [elements[0]]
    for element in elements[1:]:
        if element.name == ".":
            previous = result[-1]
            if previous.version is None:
                previous.version = element.version
        else:
            result.append(element)
    return result


def split_path_in_view(
    path: str,
    view_path: str,
    *,
    skip_at_end: int = 0,
    treat_main_as_version: bool = True,
) -> list[PathElement]:
    """Split a path and mark the leading elements that belong to the view path.

    ``skip_at_end`` drops that many trailing view path segments before
    marking, so the tail of the view path counts as repository content.
    """
    elements = split_path(path, treat_main_as_version=treat_main_as_version)
    view_segments = _view_segments(view_path, elements)
    if skip_at_end:
        view_segments = view_segments[: max(len(view_segments) - skip_at_end, 0)]
    for element, view_segment in zip(elements, view_segments, strict=False):
        element.from_view_path = element.name == view_segment
    return elements


def _view_segments(view_path: str, elements: Sequence[PathElement]) -> list[str]:
    segments = view_path.split(PATH_SEPARATOR)
    # An absolute element path compares its empty root segment with the view's first one
    if elements and elements[0].name == "" and segments:
        segments[0] = ""
    return segments


def join_path(
    elements: Sequence[PathElement],
    start: int = 0,
    end: int | None = None,
    *,
    include_versions: bool = True,
) -> str:
    """Inverse of split_path over ``elements[start:end]``."""
    return PATH_SEPARATOR.join(
        str(element) if include_versions else element.name for element in elements[start:end]
    )


def path_without_versions(elements: Sequence[PathElement]) -> str:
    return join_path(elements, include_versions=False)


def relative_path_with_versions(elements: Sequence[PathElement]) -> str:
    """Join the elements that are not part of the view path."""
    return PATH_SEPARATOR.join(str(e) for e in elements if not e.from_view_path)


def extract_element_path(path: str, *, treat_main_as_version: bool = True) -> str:
    """Version-free lookup key of an extended path."""
    return path_without_versions(split_path(path, treat_main_as_version=treat_main_as_version))


def remove_unneeded_dots(path: str, *, treat_main_as_version: bool = True) -> str:
    return join_path(split_path(path, treat_main_as_version=treat_main_as_version))


def replace_last_version(path: str, version: str, *, treat_main_as_version: bool = True) -> str:
    """Re-target the last element of ``path`` to ``version``."""
    elements = split_path(path, treat_main_as_version=treat_main_as_version)
    if not elements:
        raise MalformedPathError(path, "no elements")
    elements[-1].set_version(version)
    return join_path(elements)


def is_inside_view(path: str, view_path: str) -> bool:
    """True when every segment of ``view_path`` prefixes ``path``."""
    elements = split_path(path)
    view_segments = _view_segments(view_path, elements)
    if len(view_segments) > len(elements):
        return False
    return all(seg == el.name for seg, el in zip(view_segments, elements, strict=False))


def insert_dots(path: str, *, is_directory: bool) -> str:
    """Move directory versions onto a ``.`` child (``d@@/main/3/f`` -> ``d/.@@/main/3/f``).

    The tool then addresses the directory version itself rather than the
    element through its parent's selection.
    """
    elements = split_path(normalize_path(path))
    last_directory = len(elements) - (1 if is_directory else 2)
    rendered: list[str] = []
    for index, element in enumerate(elements):
        if index <= last_directory and element.version is not None:
            rendered.append(f"{element.name}{PATH_SEPARATOR}.{element.version}")
        else:
            rendered.append(str(element))
    return PATH_SEPARATOR.join(rendered)


# =============================================================================
# Normalization
# =============================================================================


def normalize_file_name(path: str) -> str:
    """Resolve ``.`` and ``..`` segments and collapse repeated separators."""
    segments = path.split(PATH_SEPARATOR)
    stack: list[str] = []
    for index, segment in enumerate(segments):
        if segment == ".":
            continue
        if segment == "":
            # Keep the root marker of an absolute path only
            if index == 0:
                stack.append(segment)
            continue
        if segment == "..":
            if not stack or stack == [""]:
                raise MalformedPathError(path, "invalid parent links balance")
            stack.pop()
            continue
        stack.append(segment)
    if stack == [""]:
        return PATH_SEPARATOR
    return PATH_SEPARATOR.join(stack)


def normalize_path(path: str | None, *, required: bool = False) -> str:
    """Trim, unify separators, drop a trailing separator, then normalize.

    Raises:
        MalformedPathError: if ``required`` and nothing is left after trimming,
            or the ``..`` segments climb above the root.
    """
    text = (path or "").strip().replace("\\", PATH_SEPARATOR)
    if not text:
        if required:
            raise MalformedPathError(path or "", "empty path")
        return ""
    if text.endswith(PATH_SEPARATOR) and len(text) > 1:
        text = text[:-1]
    return normalize_file_name(text)
