# nmpatch/plugin.py
"""
Build-hook adapter.

esbuild_plugin() returns a named plugin whose async setup() finishes all
patching before it returns, so later build steps only ever see patched files.

A tiny registry lets a host register plugins by name and run every setup
hook in registration order.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .config import PLUGIN_NAME, PatchOptions
from .patcher import PatchResult, disable_node_modules_issues

SetupFn = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class BuildPlugin:
    name: str
    setup: SetupFn


def esbuild_plugin(options: Optional[PatchOptions] = None) -> BuildPlugin:
    """Wrap a patch run as a build plugin named 'node-modules-vscode-problems-patch'."""

    async def setup(build: Any = None) -> PatchResult:
        # File I/O is blocking; run it off the event loop and wait for it.
        return await asyncio.to_thread(disable_node_modules_issues, options)

    return BuildPlugin(name=PLUGIN_NAME, setup=setup)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_HOOKS: Dict[str, BuildPlugin] = {}


def register_hook(plugin: BuildPlugin) -> None:
    """Register a plugin under its name (re-registering replaces it)."""
    _HOOKS[plugin.name] = plugin


def get_hook(name: str) -> Optional[BuildPlugin]:
    return _HOOKS.get(name)


def clear_hooks() -> None:
    _HOOKS.clear()


async def run_setup_hooks(build: Any = None) -> Dict[str, Any]:
    """
    Await each registered plugin's setup, one at a time.

    Returns:
      {plugin_name: setup_return_value}
    Errors propagate; later hooks are not run.
    """
    results: Dict[str, Any] = {}
    plugins: List[BuildPlugin] = list(_HOOKS.values())
    for plugin in plugins:
        results[plugin.name] = await plugin.setup(build)
    return results
