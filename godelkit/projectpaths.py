"""Path matchers and listing of project paths."""

from __future__ import annotations

import fnmatch
import os
import re
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Protocol


class Matcher(Protocol):
    def matches(self, rel_path: str) -> bool: ...


def _components(rel_path: str) -> list[str]:
    parts = re.split(r"[\\/]", os.fspath(rel_path))
    return [part for part in parts if part not in ("", ".", "..")]


class NameMatcher:
    """Matches a path if any of its components fully matches one of the regular expressions."""

    def __init__(self, *patterns: str) -> None:
        self.patterns = tuple(patterns)
        self._compiled = [re.compile(pattern) for pattern in patterns]

    def __repr__(self) -> str:
        return f"NameMatcher{self.patterns!r}"

    def matches(self, rel_path: str) -> bool:
        return any(
            regex.fullmatch(part) for part in _components(rel_path) for regex in self._compiled
        )


class PathMatcher:
    """Matches a path equal to, or beneath, one of the given (glob) paths."""

    def __init__(self, *paths: str) -> None:
        self.paths = tuple(paths)
        self._split = [_components(path) for path in paths]

    def __repr__(self) -> str:
        return f"PathMatcher{self.paths!r}"

    def matches(self, rel_path: str) -> bool:
        parts = _components(rel_path)
        for pattern in self._split:
            if not pattern or len(parts) < len(pattern):
                continue
            if all(fnmatch.fnmatchcase(part, glob) for part, glob in zip(parts, pattern)):
                return True
        return False


class _AnyMatcher:
    def __init__(self, *matchers: Matcher) -> None:
        self._matchers = matchers

    def matches(self, rel_path: str) -> bool:
        return any(m.matches(rel_path) for m in self._matchers)


def _string_list(value: Any, what: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{what} must be a list")
    return [str(item) for item in value]


@dataclass
class NamesPathsCfg:
    """Names (regular expressions) and paths that together describe a set of files."""

    names: list[str] = field(default_factory=list)
    paths: list[str] = field(default_factory=list)

    def matcher(self) -> Matcher:
        return _AnyMatcher(NameMatcher(*self.names), PathMatcher(*self.paths))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "NamesPathsCfg":
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ValueError("names/paths configuration must be a mapping")
        return cls(
            names=_string_list(data.get("names"), "names"),
            paths=_string_list(data.get("paths"), "paths"),
        )

    def to_dict(self) -> dict[str, list[str]]:
        out: dict[str, list[str]] = {}
        if self.names:
            out["names"] = list(self.names)
        if self.paths:
            out["paths"] = list(self.paths)
        return out


def _walk(root: str, rel: str) -> Iterator[str]:
    directory = os.path.join(root, rel) if rel else root
    for name in sorted(os.listdir(directory)):
        child = os.path.join(rel, name) if rel else name
        yield child
        full = os.path.join(root, child)
        if os.path.isdir(full) and not os.path.islink(full):
            yield from _walk(root, child)


def list_files(root, include: Matcher | None, exclude: Matcher | None) -> list[str]:
    """List paths under root (relative to it, in lexical walk order) that match include but not exclude."""
    if include is None:
        return []
    return [
        rel
        for rel in _walk(os.fspath(root), "")
        if include.matches(rel) and not (exclude is not None and exclude.matches(rel))
    ]


def list_project_paths(project_dir, include: Matcher | None, exclude: Matcher | None) -> list[str]:
    """List matching paths in the project directory, relative to the working directory."""
    wd = os.getcwd()
    project_dir = os.fspath(project_dir)
    if not os.path.isabs(project_dir):
        project_dir = os.path.join(wd, project_dir)
    prefix = os.path.relpath(project_dir, wd)
    files = list_files(project_dir, include, exclude)
    if prefix:
        files = [os.path.normpath(os.path.join(prefix, f)) for f in files]
    return files