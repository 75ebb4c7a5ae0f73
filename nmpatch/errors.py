# nmpatch/errors.py
from __future__ import annotations

from pathlib import Path


class PatchError(Exception):
    """Base class for every error nmpatch raises on purpose."""


class ResolutionError(PatchError):
    """
    The target root or pattern could not be enumerated
    (missing directory, permission denied, ...).
    """


class TargetIOError(PatchError):
    """
    Reading or writing a single target file failed.

    The offending path is kept on the exception so callers running with
    keep_going can report it.
    """

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
