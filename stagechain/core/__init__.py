"""Core chain primitives: deferred stage entries and the invocation chain."""

from stagechain.core.chain import Chain, Continuation, RelocationMode, Stage, resolve_handler
from stagechain.core.entry import Entry

__all__ = ["Chain", "Continuation", "Entry", "RelocationMode", "Stage", "resolve_handler"]
