# nmpatch/__init__.py
from __future__ import annotations

from .config import DEFAULT_MARKER, DEFAULT_NODE_MODULES_PATH, PatchOptions, options_from_env
from .errors import PatchError, ResolutionError, TargetIOError
from .patcher import PatchResult, disable_node_modules_issues, patch_file
from .plugin import BuildPlugin, esbuild_plugin, register_hook, run_setup_hooks
from .resolvers import GlobResolver, WalkResolver, is_ignored, make_resolver

__all__ = [
    "DEFAULT_MARKER",
    "DEFAULT_NODE_MODULES_PATH",
    "PatchOptions",
    "options_from_env",
    "PatchError",
    "ResolutionError",
    "TargetIOError",
    "PatchResult",
    "disable_node_modules_issues",
    "patch_file",
    "BuildPlugin",
    "esbuild_plugin",
    "register_hook",
    "run_setup_hooks",
    "GlobResolver",
    "WalkResolver",
    "is_ignored",
    "make_resolver",
]
