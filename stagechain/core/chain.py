"""Middleware chain with onion-style invocation.

Stages are registered as deferred factories and instantiated fresh for every
invocation.  Each stage receives the payload plus a zero-argument
continuation: code before ``next()`` runs on the way in, code after it runs
on the way out, and a stage that never calls ``next()`` stops the chain.

Usage::

    def setup(chain: Chain) -> None:
        chain.add(TimingStage, telemetry, name="post_process")
        chain.add(ScrubParams)
        chain.insert_before(ScrubParams, DropHealthChecks)

    chain = Chain(setup)
    chain.invoke(transaction, final_action=lambda: store(transaction))
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterator
from typing import Any, Literal, Protocol, runtime_checkable

from loguru import logger

from stagechain.core.entry import Entry

Continuation = Callable[[], Any]
"""Signature of the ``next`` callback handed to each stage."""

RelocationMode = Literal["keep", "replace"]


@runtime_checkable
class Stage(Protocol):
    """Protocol for chain stages.

    Implementations are constructed with the arguments stored in their entry
    and must expose ``call(*payload, next)``.  A stage may:

    1. Run code, call ``next()``, run more code — **wrap**.
    2. Return without calling ``next()`` — **short-circuit**.
    3. Return the value of ``next()`` so the final action's result travels back
       out to the caller.

    Plain callables (``__call__(*payload, next)``) are accepted as well.
    """

    def call(self, *args: Any) -> Any: ...


def resolve_handler(instance: Any) -> Callable[..., Any]:
    """Return the callable that runs ``instance`` as a stage.

    Raises:
        TypeError: the instance has neither ``call`` nor ``__call__``.
    """
    handler = getattr(instance, "call", None)
    if callable(handler):
        return handler
    if callable(instance):
        return instance
    raise TypeError(f"{type(instance).__name__} is not a chain stage: define call(*payload, next)")


class Chain:
    """Ordered, mutable collection of stage entries.

    At most one entry exists per identifier; insertion order is execution
    order.  ``relocation`` controls what happens when ``insert_before`` or
    ``insert_after`` moves an entry that is already present: ``"keep"`` reuses
    the original constructor arguments and ignores the new ones,
    ``"replace"`` rebuilds the entry from the arguments given to the move.
    """

    __slots__ = ("_entries", "_relocation")

    def __init__(
        self,
        builder: Callable[[Chain], None] | None = None,
        *,
        relocation: RelocationMode = "keep",
    ) -> None:
        if relocation not in ("keep", "replace"):
            raise ValueError(f"relocation must be 'keep' or 'replace', got {relocation!r}")
        self._entries: list[Entry] = []
        self._relocation: RelocationMode = relocation
        if builder is not None:
            builder(self)

    @property
    def entries(self) -> list[Entry]:
        """Copy of the current entries in execution order."""
        return list(self._entries)

    @property
    def relocation(self) -> RelocationMode:
        return self._relocation

    # ── Configuration ────────────────────────────────────────────────

    def add(self, identifier: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """Append a stage unless one with the same identifier is registered."""
        if self.exists(identifier):
            logger.debug("chain add skipped, {} already registered", _label(identifier))
            return
        self._entries.append(Entry(identifier, args, kwargs))
        logger.debug("chain add {} at position {}", _label(identifier), len(self._entries) - 1)

    def remove(self, identifier: Any) -> None:
        """Drop every entry for ``identifier``; absent identifiers are ignored."""
        before = len(self._entries)
        self._entries = [entry for entry in self._entries if not entry.matches(identifier)]
        if len(self._entries) != before:
            logger.debug("chain remove {}", _label(identifier))

    def exists(self, identifier: Any) -> bool:
        return any(entry.matches(identifier) for entry in self._entries)

    def insert_before(
        self,
        old: Any,
        new: Callable[..., Any],
        *args: Any,
        **kwargs: Any,
    ) -> None:
        """Place ``new`` right before ``old``, or at the front when ``old`` is absent."""
        entry = self._detach_or_build(new, args, kwargs)
        index = self._index_of(old)
        position = 0 if index is None else index
        self._entries.insert(position, entry)
        logger.debug("chain insert {} before {} at position {}", entry.name, _label(old), position)

    def insert_after(
        self,
        old: Any,
        new: Callable[..., Any],
        *args: Any,
        **kwargs: Any,
    ) -> None:
        """Place ``new`` right after ``old``, or at the end when ``old`` is absent."""
        entry = self._detach_or_build(new, args, kwargs)
        index = self._index_of(old)
        position = len(self._entries) if index is None else index + 1
        self._entries.insert(position, entry)
        logger.debug("chain insert {} after {} at position {}", entry.name, _label(old), position)

    def clear(self) -> None:
        self._entries.clear()
        logger.debug("chain cleared")

    # ── Invocation ───────────────────────────────────────────────────

    def retrieve(self) -> list[Any]:
        """Return new stage instances, one per entry, in execution order."""
        return [entry.make_new() for entry in self._entries]

    def invoke(self, *args: Any, final_action: Continuation | None = None) -> Any:
        """Run every stage around ``final_action`` and return the outermost result.

        ``final_action`` may also be given as the last positional argument;
        all other positional arguments are the payload handed to each stage.
        Stages run as nested calls, so stack depth grows with chain length and
        very long chains can hit the interpreter recursion limit.
        """
        if final_action is None:
            if not args or not callable(args[-1]):
                raise TypeError("invoke() requires a callable final_action")
            *payload, final_action = args
        else:
            payload = list(args)

        remaining = deque(self.retrieve())

        def step() -> Any:
            if not remaining:
                return final_action()
            stage = remaining.popleft()
            return resolve_handler(stage)(*payload, step)

        return step()

    # ── Container protocol ───────────────────────────────────────────

    def __contains__(self, identifier: object) -> bool:
        return self.exists(identifier)

    def __iter__(self) -> Iterator[Entry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        names = [entry.name for entry in self._entries]
        return f"Chain({' → '.join(names)})"

    # ── Internals ────────────────────────────────────────────────────

    def _index_of(self, identifier: Any) -> int | None:
        for index, entry in enumerate(self._entries):
            if entry.matches(identifier):
                return index
        return None

    def _detach_or_build(
        self,
        identifier: Callable[..., Any],
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Entry:
        index = self._index_of(identifier)
        if index is None:
            return Entry(identifier, args, kwargs)

        existing = self._entries.pop(index)
        if self._relocation == "replace":
            return Entry(identifier, args, kwargs)
        if args or kwargs:
            logger.warning(
                "chain relocation of {} keeps its original arguments; new arguments ignored",
                existing.name,
            )
        return existing


def _label(identifier: Any) -> str:
    return getattr(identifier, "__qualname__", None) or repr(identifier)
