# nmpatch/patcher.py

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .config import PatchOptions
from .errors import TargetIOError
from .resolvers import make_resolver
from .text_io import read_text, write_text_atomic

logger = logging.getLogger(__name__)

START_MESSAGE = "⛔ Disabling TypeScript issues in all node_modules..."
FOUND_MESSAGE = "⚠️ Found {count} file(s) that were not ignored before this patch run."
RESTART_HINT = (
    "\tPlease restart the TS language server to update the problems view. "
    '(F1 + "TypeScript: Restart TS server" in VSCode)'
)
END_MESSAGE = "✅ Disabled TypeScript issues in all node_modules"


@dataclass
class PatchResult:
    """Outcome of one run. Nothing here is persisted."""

    patched: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    failed: List[Tuple[Path, str]] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.patched)

    @property
    def ok(self) -> bool:
        return not self.failed


# ---------------------------------------------------------------------------
# Single file
# ---------------------------------------------------------------------------

def patch_file(path: Path, marker_text: str) -> bool:
    """
    Prepend `marker_text` to `path` unless the file already starts with it.

    Returns True if the file was rewritten, False if it already carried the
    marker. Any read/write failure surfaces as TargetIOError.
    """
    try:
        content = read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        raise TargetIOError(path, f"read failed: {e}") from e

    if content.startswith(marker_text):
        return False

    # A symlinked target is patched in place of the file it points to;
    # replacing the link itself would leave the real file unmarked.
    try:
        write_text_atomic(Path(os.path.realpath(path)), marker_text + content)
    except OSError as e:
        raise TargetIOError(path, f"write failed: {e}") from e
    return True


# ---------------------------------------------------------------------------
# Whole run
# ---------------------------------------------------------------------------

def disable_node_modules_issues(options: Optional[PatchOptions] = None) -> PatchResult:
    """
    Resolve targets and patch them one after another.

    Rules:
      - Start/end lines are printed unless options.quiet.
      - The "found unpatched files" warning and restart hint are printed
        whenever at least one file was patched, quiet or not.
      - Without keep_going the first ResolutionError/TargetIOError aborts the
        run; files already written stay written.
      - With keep_going, per-file errors land in result.failed instead.
    """
    options = options or PatchOptions()
    result = PatchResult()

    if not options.quiet:
        print(START_MESSAGE)

    resolver = make_resolver(options)
    for path in resolver.resolve():
        try:
            changed = patch_file(path, options.marker_text)
        except TargetIOError as e:
            if not options.keep_going:
                raise
            logger.warning("Could not patch %s: %s", e.path, e.reason)
            result.failed.append((e.path, e.reason))
            continue

        if changed:
            logger.debug("patched %s", path)
            result.patched.append(path)
        else:
            logger.debug("already patched %s", path)
            result.skipped.append(path)

    if result.count > 0:
        print(FOUND_MESSAGE.format(count=result.count))
        print(RESTART_HINT)

    if result.failed:
        print(f"[nmpatch] {len(result.failed)} file(s) could not be patched:")
        for path, reason in result.failed:
            print(f"  - {path}: {reason}")

    if not options.quiet:
        print(END_MESSAGE)

    return result
