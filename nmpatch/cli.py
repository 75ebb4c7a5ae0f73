# nmpatch/cli.py

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .config import MODES, PatchOptions, options_from_env
from .errors import PatchError
from .patcher import disable_node_modules_issues


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="nmpatch",
        description=(
            "Prepend '// @ts-nocheck' to dependency TypeScript files so the "
            "editor's problems view stops reporting them."
        ),
    )
    p.add_argument(
        "path_spec",
        nargs="?",
        default=None,
        help="Directory to walk or glob pattern (default: ./node_modules/).",
    )
    p.add_argument(
        "--ignore",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Glob pattern to exclude. May be given more than once.",
    )
    p.add_argument("--marker", default=None, help="Marker text to prepend ('\\n' is expanded).")
    p.add_argument("--ext", dest="extension", default=None, help="Target extension in walk mode (default: .ts).")
    p.add_argument("--mode", choices=MODES, default=None, help="Resolution mode (default: auto).")
    p.add_argument(
        "--keep-going",
        action="store_true",
        default=None,
        help="Report unreadable/unwritable files at the end instead of aborting.",
    )
    p.add_argument("-q", "--quiet", action="store_true", default=None, help="Only print warnings.")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every file decision.")
    p.set_defaults(func=cmd_patch)
    return p


def options_from_args(args: argparse.Namespace, base: Optional[PatchOptions] = None) -> PatchOptions:
    """CLI flags win over whatever `base` (usually env-derived) already holds."""
    base = base or PatchOptions()
    marker = args.marker.replace("\\n", "\n") if args.marker is not None else None
    return base.with_overrides(
        path_spec=args.path_spec,
        ignore=tuple(args.ignore) if args.ignore is not None else None,
        marker_text=marker,
        extension=args.extension,
        mode=args.mode,
        keep_going=args.keep_going,
        quiet=args.quiet,
    )


def cmd_patch(args: argparse.Namespace) -> int:
    options = options_from_args(args, options_from_env())
    try:
        result = disable_node_modules_issues(options)
    except PatchError as e:
        print(f"[nmpatch] error: {e}", file=sys.stderr)
        return 1
    return 0 if result.ok else 1


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(Path.cwd() / ".env")
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(name)s] %(levelname)s %(message)s",
    )
    return args.func(args)
