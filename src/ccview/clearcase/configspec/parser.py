"""Config spec text parser.

Recognized lines::

    load <path> [<path> ...]
    element [-file | -directory | -eltype <type>] <pattern> <selector> [options]
    mkbranch <name> ... end mkbranch [<name>]
    time <date> ... end time [<date>]

``#`` starts a comment when it begins a word. Options other than
``-mkbranch <name>`` are ignored.
"""

from __future__ import annotations

from ccview.clearcase.configspec.evaluator import ConfigSpec
from ccview.clearcase.configspec.rules import LoadRule, ScopeType, StandardRule
from ccview.clearcase.errors import ConfigSpecParseError
from ccview.clearcase.paths import normalize_path
from ccview.config.constants import PATH_SEPARATOR
from ccview.core.logging import get_logger

log = get_logger(__name__)

_SCOPE_FLAGS = {
    "-file": ScopeType.FILE,
    "-directory": ScopeType.DIRECTORY,
    "-eltype": ScopeType.ANY,
}


def parse_config_spec(text: str, view_root: str, *, view_is_dynamic: bool = False) -> ConfigSpec:
    """Parse config spec text into a ConfigSpec.

    Raises:
        ConfigSpecParseError: on the first structurally invalid line.
    """
    load_rules: list[LoadRule] = []
    standard_rules: list[StandardRule] = []
    mkbranch_blocks: list[str] = []
    time_depth = 0

    for line_number, raw in enumerate(text.splitlines(), start=1):
        words = _split_words(raw, line_number)
        if not words:
            continue
        keyword = words[0].lower()

        if keyword == "element":
            default_branch = mkbranch_blocks[-1] if mkbranch_blocks else None
            standard_rules.append(_parse_element(words[1:], raw, line_number, default_branch))
        elif keyword == "load":
            if len(words) < 2:
                raise ConfigSpecParseError(line_number, raw, "load rule without a path")
            for path in words[1:]:
                load_rules.append(LoadRule(view_root, normalize_path(path)))
        elif keyword == "mkbranch":
            if len(words) < 2:
                raise ConfigSpecParseError(line_number, raw, "mkbranch without a branch name")
            mkbranch_blocks.append(words[1])
        elif keyword == "time":
            log.warning("config_spec_time_rule_ignored", line=line_number)
            time_depth += 1
        elif keyword == "end":
            block = words[1].lower() if len(words) > 1 else ""
            if block == "mkbranch" and mkbranch_blocks:
                mkbranch_blocks.pop()
            elif block == "time" and time_depth:
                time_depth -= 1
            else:
                raise ConfigSpecParseError(line_number, raw, "unbalanced end")
        elif keyword == "include":
            raise ConfigSpecParseError(line_number, raw, "include is not supported")
        else:
            raise ConfigSpecParseError(line_number, raw, f"unknown rule {words[0]!r}")

    if mkbranch_blocks:
        raise ConfigSpecParseError(
            len(text.splitlines()), "", f"mkbranch {mkbranch_blocks[-1]} is not closed"
        )

    return ConfigSpec(
        view_root=view_root,
        load_rules=tuple(load_rules),
        standard_rules=tuple(standard_rules),
        view_is_dynamic=view_is_dynamic,
    )


def _parse_element(
    args: list[str], raw: str, line_number: int, default_branch: str | None
) -> StandardRule:
    scope = ScopeType.ANY
    if args and args[0].lower() in _SCOPE_FLAGS:
        scope = _SCOPE_FLAGS[args[0].lower()]
        if args[0].lower() == "-eltype":
            if len(args) < 2:
                raise ConfigSpecParseError(line_number, raw, "-eltype without a type")
            args = args[1:]
        args = args[1:]

    if len(args) < 2:
        raise ConfigSpecParseError(line_number, raw, "expected <pattern> <version-selector>")

    pattern = args[0].replace("\\", PATH_SEPARATOR)
    selector, rest = _take_selector(args[1:])
    if selector.startswith("{"):
        log.warning("config_spec_query_selector_unsupported", line=line_number)

    mkbranch = default_branch
    for index, option in enumerate(rest):
        if option.lower() == "-mkbranch" and index + 1 < len(rest):
            mkbranch = rest[index + 1]
            break

    return StandardRule(
        scope=scope,
        scope_pattern=pattern,
        version_selector=selector.replace("\\", PATH_SEPARATOR),
        mkbranch=mkbranch,
        text=raw.strip(),
    )


def _take_selector(words: list[str]) -> tuple[str, list[str]]:
    """Split off the selector; a ``{query}`` selector may span several words."""
    if not words[0].startswith("{"):
        return words[0], words[1:]
    for index, word in enumerate(words):
        if word.endswith("}"):
            return " ".join(words[: index + 1]), words[index + 1 :]
    return " ".join(words), []


def _split_words(line: str, line_number: int) -> list[str]:
    """Whitespace split honoring double quotes; stops at a ``#`` word."""
    words: list[str] = []
    current: list[str] = []
    in_word = False
    quoted = False
    for char in line:
        if quoted:
            if char == '"':
                quoted = False
            else:
                current.append(char)
        elif char == '"':
            quoted = True
            in_word = True
        elif char.isspace():
            if in_word:
                words.append("".join(current))
                current = []
                in_word = False
        elif char == "#" and not in_word:
            break
        else:
            current.append(char)
            in_word = True
    if quoted:
        raise ConfigSpecParseError(line_number, line, "unterminated quote")
    if in_word:
        words.append("".join(current))
    return words
