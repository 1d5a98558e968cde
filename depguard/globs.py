"""Glob helpers for allowlists and workspace member patterns.

Patterns support ``*``, ``?``, ``[...]`` classes, ``{a,b}`` alternation,
``\\`` escapes and ``**`` as a whole path component. Matching is
case-sensitive and delegates to :func:`fnmatch.fnmatchcase`.
"""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Iterable, List, Sequence, Tuple


class GlobError(ValueError):
    """Raised when a glob pattern is syntactically invalid."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"invalid glob {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


def validate_glob(pattern: str) -> None:
    """Raise :class:`GlobError` when ``pattern`` cannot be compiled."""
    if not isinstance(pattern, str):
        raise GlobError(str(pattern), "pattern must be a string")
    depth = 0
    index = 0
    length = len(pattern)
    while index < length:
        char = pattern[index]
        if char == "\\":
            if index + 1 >= length:
                raise GlobError(pattern, "dangling escape at end of pattern")
            index += 2
            continue
        if char == "[":
            index = _class_end(pattern, index)
            continue
        if char == "{":
            if depth:
                raise GlobError(pattern, "nested alternation groups are not supported")
            depth += 1
        elif char == "}":
            if not depth:
                raise GlobError(pattern, "unopened alternation group")
            depth -= 1
        elif char == "*" and index + 1 < length and pattern[index + 1] == "*":
            start_ok = index == 0 or pattern[index - 1] == "/"
            end = index + 2
            end_ok = end == length or pattern[end] == "/"
            if not (start_ok and end_ok):
                raise GlobError(pattern, "'**' must be a whole path component")
            index = end
            continue
        index += 1
    if depth:
        raise GlobError(pattern, "unclosed alternation group")


def _class_end(pattern: str, start: int) -> int:
    """Return the index just past the character class opened at ``start``."""
    index = start + 1
    if index < len(pattern) and pattern[index] in "!^":
        index += 1
    if index < len(pattern) and pattern[index] == "]":
        index += 1
    while index < len(pattern):
        if pattern[index] == "]":
            return index + 1
        index += 1
    raise GlobError(pattern, "unclosed character class")


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternation and rewrite escapes for fnmatch."""
    validate_glob(pattern)
    prefixes: List[str] = [""]
    index = 0
    length = len(pattern)
    while index < length:
        char = pattern[index]
        if char == "\\":
            piece = _escape_literal(pattern[index + 1])
            prefixes = [prefix + piece for prefix in prefixes]
            index += 2
            continue
        if char == "[":
            end = _class_end(pattern, index)
            piece = pattern[index:end].replace("[^", "[!", 1)
            prefixes = [prefix + piece for prefix in prefixes]
            index = end
            continue
        if char == "{":
            close = pattern.index("}", index)
            options = _split_alternatives(pattern[index + 1 : close])
            prefixes = [prefix + option for prefix in prefixes for option in options]
            index = close + 1
            continue
        prefixes = [prefix + char for prefix in prefixes]
        index += 1
    return prefixes


def _split_alternatives(body: str) -> List[str]:
    options: List[str] = []
    current: List[str] = []
    index = 0
    while index < len(body):
        char = body[index]
        if char == "\\" and index + 1 < len(body):
            current.append(_escape_literal(body[index + 1]))
            index += 2
            continue
        if char == ",":
            options.append("".join(current))
            current = []
        else:
            current.append(char)
        index += 1
    options.append("".join(current))
    return options


def _escape_literal(char: str) -> str:
    if char in "*?[]":
        return f"[{char}]"
    return char


def _option_matches(option: str, value: str) -> bool:
    """fnmatch ``option``, letting each ``**/`` also match zero directories."""
    if fnmatchcase(value, option):
        return True
    start = option.find("**/")
    while start != -1:
        if start == 0 or option[start - 1] == "/":
            if _option_matches(option[:start] + option[start + 3 :], value):
                return True
        start = option.find("**/", start + 1)
    return False


def path_glob_match(pattern: str, path: str) -> bool:
    """Match ``path`` component-wise; only ``**`` spans multiple components."""
    path_parts = [part for part in path.replace("\\", "/").split("/") if part and part != "."]
    for option in expand_braces(pattern):
        option_parts = [part for part in option.split("/") if part and part != "."]
        if _match_parts(option_parts, path_parts):
            return True
    return False


def _match_parts(pattern_parts: Sequence[str], path_parts: Sequence[str]) -> bool:
    if not pattern_parts:
        return not path_parts
    head = pattern_parts[0]
    if head == "**":
        rest = pattern_parts[1:]
        return any(_match_parts(rest, path_parts[skip:]) for skip in range(len(path_parts) + 1))
    if not path_parts:
        return False
    if not fnmatchcase(path_parts[0], head):
        return False
    return _match_parts(pattern_parts[1:], path_parts[1:])


@dataclass(frozen=True)
class Allowlist:
    """Pre-expanded set of allow patterns for one check."""

    patterns: Tuple[str, ...] = ()

    @classmethod
    def from_patterns(cls, patterns: Iterable[str]) -> "Allowlist":
        expanded: List[str] = []
        for pattern in patterns:
            expanded.extend(expand_braces(pattern))
        return cls(tuple(expanded))

    def matches(self, value: str) -> bool:
        return any(_option_matches(pattern, value) for pattern in self.patterns)

    def __bool__(self) -> bool:
        return bool(self.patterns)


__all__ = [
    "Allowlist",
    "GlobError",
    "expand_braces",
    "path_glob_match",
    "validate_glob",
]
