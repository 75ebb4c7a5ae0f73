# nmpatch/text_io.py
from __future__ import annotations

import os
from pathlib import Path


def read_text(path: Path) -> str:
    """
    Read a file as UTF-8 with line endings left exactly as they are on disk.

    Unlike the usual text-mode read, CRLF is not folded to LF, so whatever
    follows the marker after a patch is byte-identical to the original.
    """
    with path.open("r", encoding="utf-8", newline="") as f:
        return f.read()


def write_text_atomic(path: Path, text: str) -> None:
    """
    Replace `path` with `text`:
      1) write a temporary sibling file
      2) os.replace() it over the target

    Readers see either the old or the new content, never a half-written file.
    The temporary file is removed if anything goes wrong.
    """
    tmp = path.with_name(f".{path.name}.nmpatch.tmp")
    try:
        with tmp.open("w", encoding="utf-8", newline="") as f:
            f.write(text)
        try:
            os.chmod(tmp, path.stat().st_mode & 0o7777)
        except FileNotFoundError:
            pass
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
