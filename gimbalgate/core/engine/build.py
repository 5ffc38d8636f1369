"""
Build lifecycle — the host-side objects the plugin is wired into.

A minimal, in-process stand-in for a build tool's compiler: async
hooks, a compilation with its two diagnostics collections, and a stats
snapshot. Real hosts provide their own objects with the same shape;
the CLI uses these to run the gate against a build that already
finished.

Hook flow for one build:

    compiler.hooks.emit  (compilation)   ← audits run here
    compiler.hooks.done  (stats)         ← bailout report written here
"""

from __future__ import annotations

import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

PRODUCTION = "production"

# Checked in order when the compilation carries no explicit mode
MODE_ENV_VARS = ("GIMBAL_GATE_MODE", "NODE_ENV")

ProgressReporter = Callable[[float, str], None]


def resolve_mode(explicit: str | None = None) -> str | None:
    """Explicit mode first, then the environment."""
    if explicit:
        return explicit
    for var in MODE_ENV_VARS:
        value = os.environ.get(var)
        if value:
            return value
    return None


def is_production(explicit: str | None = None) -> bool:
    return resolve_mode(explicit) == PRODUCTION


@dataclass
class HookContext:
    """Passed as first argument to taps registered with ``context=True``."""

    report_progress: ProgressReporter | None = None


@dataclass
class _Tap:
    name: str
    fn: Callable[..., Awaitable[Any]]
    context: bool = False


class AsyncSeriesHook:
    """Ordered async hook: taps run one after another, each awaited.

    An exception raised by a tap stops the series and propagates to
    whoever called the hook.
    """

    def __init__(self, name: str):
        self.name = name
        self._taps: list[_Tap] = []

    @property
    def taps(self) -> list[str]:
        return [t.name for t in self._taps]

    def tap(self, name: str, fn: Callable[..., Awaitable[Any]], *, context: bool = False) -> None:
        self._taps.append(_Tap(name=name, fn=fn, context=context))

    async def call(self, *args: Any, progress: ProgressReporter | None = None) -> list[Any]:
        """Run every tap in order. Returns their results, in tap order."""
        results = []
        for t in self._taps:
            logger.debug("hook %s → %s", self.name, t.name)
            if t.context:
                results.append(await t.fn(HookContext(report_progress=progress), *args))
            else:
                results.append(await t.fn(*args))
        return results


@dataclass
class HookResults:
    """Tap return values per hook, in tap order."""

    emit: list[Any] = field(default_factory=list)
    done: list[Any] = field(default_factory=list)


@dataclass
class CompilerHooks:
    emit: AsyncSeriesHook = field(default_factory=lambda: AsyncSeriesHook("emit"))
    done: AsyncSeriesHook = field(default_factory=lambda: AsyncSeriesHook("done"))


@dataclass
class Compiler:
    """Build-level state shared by every compilation."""

    output_path: Path
    context: Path = field(default_factory=Path.cwd)   # project root
    mode: str | None = None
    hooks: CompilerHooks = field(default_factory=CompilerHooks)
    progress: ProgressReporter | None = None

    def new_compilation(self) -> Compilation:
        return Compilation(compiler=self)

    async def emit(self, compilation: Compilation) -> list[Any]:
        return await self.hooks.emit.call(compilation, progress=self.progress)

    async def done(self, stats: Stats) -> list[Any]:
        return await self.hooks.done.call(stats)

    async def finish(self, compilation: Compilation, stats: Stats | None = None) -> HookResults:
        """Run the tail of the build: ``emit`` then ``done``."""
        emitted = await self.emit(compilation)
        done = await self.done(stats if stats is not None else Stats(compilation))
        return HookResults(emit=emitted, done=done)


@dataclass
class Compilation:
    """One build's output and diagnostics."""

    compiler: Compiler
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    modules: list[dict[str, Any]] = field(default_factory=list)

    @property
    def output_path(self) -> Path:
        return self.compiler.output_path

    @property
    def mode(self) -> str | None:
        return self.compiler.mode


class Stats:
    """Post-build snapshot of a compilation."""

    def __init__(self, compilation: Compilation, snapshot: dict[str, Any] | None = None):
        self.compilation = compilation
        self._snapshot = snapshot

    def to_json(self) -> dict[str, Any]:
        """Serializable snapshot with a ``modules`` list."""
        if self._snapshot is not None:
            return self._snapshot
        return {"modules": list(self.compilation.modules)}
