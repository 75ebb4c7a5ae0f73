# nmpatch/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_NODE_MODULES_PATH: str = "./node_modules/"
"""
Directory walked when no path or pattern is given.
"""

DEFAULT_MARKER: str = "// @ts-nocheck\n"
"""
Directive prepended to every dependency file. TypeScript skips type checking
for a file whose first line is this comment.
"""

DEFAULT_EXTENSION: str = ".ts"

PLUGIN_NAME: str = "node-modules-vscode-problems-patch"

MODES: Tuple[str, ...] = ("auto", "walk", "glob")

_GLOB_CHARS = ("*", "?", "[")
_TRUTHY = {"1", "true", "yes", "on"}


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PatchOptions:
    """
    Everything a patch run needs. Omitted fields take the defaults above.

    mode:
        'walk' recurses from path_spec as a directory root,
        'glob' expands path_spec as a pattern,
        'auto' picks 'glob' when path_spec contains a wildcard.
    keep_going:
        Record per-file read/write failures in the result instead of
        aborting the run on the first one.
    """

    path_spec: str = DEFAULT_NODE_MODULES_PATH
    ignore: Tuple[str, ...] = field(default_factory=tuple)
    marker_text: str = DEFAULT_MARKER
    quiet: bool = False
    extension: str = DEFAULT_EXTENSION
    mode: str = "auto"
    keep_going: bool = False

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got {self.mode!r}")
        # Accept any iterable of patterns but store an immutable tuple.
        # A bare string is one pattern, not a sequence of characters.
        if isinstance(self.ignore, str):
            object.__setattr__(self, "ignore", (self.ignore,))
        elif not isinstance(self.ignore, tuple):
            object.__setattr__(self, "ignore", tuple(self.ignore or ()))

    @property
    def resolved_mode(self) -> str:
        if self.mode != "auto":
            return self.mode
        if any(ch in self.path_spec for ch in _GLOB_CHARS):
            return "glob"
        return "walk"

    def with_overrides(self, **changes) -> "PatchOptions":
        """Return a copy with every non-None value in `changes` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

def _split_patterns(raw: Optional[str]) -> Optional[Tuple[str, ...]]:
    if raw is None:
        return None
    return tuple(p.strip() for p in raw.split(",") if p.strip())


def _unescape_marker(raw: Optional[str]) -> Optional[str]:
    # .env files cannot hold a literal trailing newline comfortably.
    if raw is None:
        return None
    return raw.replace("\\n", "\n")


def _parse_bool(raw: Optional[str]) -> Optional[bool]:
    if raw is None:
        return None
    return raw.strip().lower() in _TRUTHY


def options_from_env(
    environ: Optional[dict] = None,
    base: Optional[PatchOptions] = None,
) -> PatchOptions:
    """
    Build PatchOptions from NMPATCH_* environment variables.

    Env:
        NMPATCH_PATH   - directory root or glob pattern
        NMPATCH_IGNORE - comma separated ignore patterns
        NMPATCH_MARKER - marker text ('\\n' is expanded to a newline)
        NMPATCH_EXT    - target file extension
        NMPATCH_QUIET  - 1/true/yes/on to silence informational output

    Unset variables leave the corresponding field at its default.
    """
    env = os.environ if environ is None else environ
    base = base or PatchOptions()
    return base.with_overrides(
        path_spec=env.get("NMPATCH_PATH") or None,
        ignore=_split_patterns(env.get("NMPATCH_IGNORE")),
        marker_text=_unescape_marker(env.get("NMPATCH_MARKER") or None),
        extension=env.get("NMPATCH_EXT") or None,
        quiet=_parse_bool(env.get("NMPATCH_QUIET")),
    )
