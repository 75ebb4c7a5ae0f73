# nmpatch/resolvers.py
"""
Target resolution: turn PatchOptions into the list of files to patch.

Two strategies share one small protocol:

- WalkResolver: recurse from a directory root, skipping dot-entries,
  keeping files with the target extension.
- GlobResolver: expand a glob pattern ('**' is recursive).

Both drop anything matching an ignore pattern and yield paths in a stable
order, so repeated runs over an unchanged tree visit files identically.
"""

from __future__ import annotations

import glob
import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Pattern, Protocol, Set

from .config import PatchOptions
from .errors import ResolutionError

logger = logging.getLogger(__name__)


class TargetResolver(Protocol):
    def resolve(self) -> Iterator[Path]:
        ...


# ---------------------------------------------------------------------------
# Ignore patterns
# ---------------------------------------------------------------------------

def _posix(path: Path | str) -> str:
    """
    POSIX form of `path`. Absolute paths under the working directory are
    made relative to it, so '/abs/proj/node_modules/x.ts' and
    'node_modules/x.ts' match the same patterns.
    """
    text = os.path.normpath(path)
    if os.path.isabs(text):
        rel: Optional[str]
        try:
            rel = os.path.relpath(text)
        except ValueError:
            # different drive on Windows
            rel = None
        if rel is not None and rel != os.pardir and not rel.startswith(os.pardir + os.sep):
            text = rel
    text = Path(text).as_posix()
    if text.startswith("./"):
        text = text[2:]
    return text


def _segment_regex(segment: str) -> str:
    out: List[str] = []
    i, n = 0, len(segment)
    while i < n:
        ch = segment[i]
        i += 1
        if ch == "*":
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        elif ch == "[":
            start = i + 1 if i < n and segment[i] in "!]" else i
            end = segment.find("]", start)
            if end == -1:
                out.append(re.escape(ch))
                continue
            body = segment[i:end].replace("\\", "\\\\")
            if body.startswith("!"):
                body = "^" + body[1:]
            out.append(f"[{body}]")
            i = end + 1
        else:
            out.append(re.escape(ch))
    return "".join(out)


@lru_cache(maxsize=256)
def _compile(pattern: str) -> Pattern[str]:
    """
    Translate a glob into a regex one '/'-separated segment at a time.

    '*', '?' and '[...]' never cross '/'. A segment that is exactly '**'
    spans any number of directories, including none.
    """
    parts = pattern.split("/")
    out: List[str] = []
    for index, part in enumerate(parts):
        last = index == len(parts) - 1
        if part == "**":
            out.append(".*" if last else "(?:.*/)?")
        else:
            out.append(_segment_regex(part) + ("" if last else "/"))
    return re.compile("".join(out) + r"\Z")


def is_ignored(path: Path | str, patterns: Iterable[str]) -> bool:
    """
    True if `path` matches any of `patterns`.

    Same rules as glob mode: 'node_modules/*.ts' only covers direct
    children of node_modules, while '**/skip/**' covers both
    'node_modules/skip/z.ts' and 'skip/z.ts'.
    """
    rel = _posix(path)
    return any(_compile(pat).match(rel) for pat in patterns)


# ---------------------------------------------------------------------------
# Walk mode
# ---------------------------------------------------------------------------

class WalkResolver:
    """Recursive directory walk, entries visited in sorted name order."""

    def __init__(self, root: str, extension: str, ignore: Iterable[str] = ()) -> None:
        self.root = Path(root)
        self.extension = extension
        self.ignore = tuple(ignore)

    def resolve(self) -> Iterator[Path]:
        seen_dirs: Set[str] = set()
        seen_files: Set[str] = set()
        yield from self._walk(self.root, seen_dirs, seen_files)

    def _walk(self, directory: Path, seen_dirs: Set[str], seen_files: Set[str]) -> Iterator[Path]:
        real = os.path.realpath(directory)
        # Symlinked packages (pnpm, npm link) may point back into the tree.
        if real in seen_dirs:
            return
        seen_dirs.add(real)

        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise ResolutionError(f"Cannot read directory {directory}: {e.strerror or e}") from e

        for entry in entries:
            if entry.name.startswith("."):
                continue
            child = directory / entry.name
            try:
                is_dir = entry.is_dir()
            except OSError as e:
                logger.debug("cannot stat %s, treating it as a file: %s", child, e)
                is_dir = False
            if is_dir:
                yield from self._walk(child, seen_dirs, seen_files)
                continue
            if not entry.name.endswith(self.extension):
                continue
            if is_ignored(child, self.ignore):
                logger.debug("ignored %s", child)
                continue
            real_file = os.path.realpath(child)
            if real_file in seen_files:
                logger.debug("already visited %s via another link", child)
                continue
            seen_files.add(real_file)
            yield child


# ---------------------------------------------------------------------------
# Glob mode
# ---------------------------------------------------------------------------

class GlobResolver:
    """Glob expansion; a pattern that matches nothing yields nothing."""

    def __init__(self, pattern: str, ignore: Iterable[str] = ()) -> None:
        self.pattern = pattern
        self.ignore = tuple(ignore)

    def resolve(self) -> Iterator[Path]:
        matches: List[Path] = []
        seen: Set[str] = set()
        for raw in sorted(glob.glob(self.pattern, recursive=True)):
            path = Path(raw)
            if path.is_dir():
                continue
            if is_ignored(path, self.ignore):
                logger.debug("ignored %s", path)
                continue
            real = os.path.realpath(path)
            if real in seen:
                continue
            seen.add(real)
            matches.append(path)
        return iter(matches)


def make_resolver(options: PatchOptions) -> TargetResolver:
    """Pick the resolver for `options.resolved_mode`."""
    if options.resolved_mode == "glob":
        return GlobResolver(options.path_spec, options.ignore)
    return WalkResolver(options.path_spec, options.extension, options.ignore)
