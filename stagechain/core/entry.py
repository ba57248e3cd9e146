"""Deferred stage factory stored in a chain."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


def _frozen_kwargs(kwargs: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(kwargs or {}))


@dataclass(frozen=True, slots=True, eq=False)
class Entry:
    """One registered stage: its identifier plus stored constructor arguments.

    Attributes:
        identifier: The stage class (or any factory callable).  Entries are
            matched by equality on this value.
        args: Positional constructor arguments, stored verbatim.
        kwargs: Keyword constructor arguments (read-only).

    Entries compare and hash by identity; use ``matches`` to test the
    identifier.
    """

    identifier: Callable[..., Any]
    args: tuple[Any, ...] = ()
    kwargs: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))
        object.__setattr__(self, "kwargs", _frozen_kwargs(self.kwargs))

    @classmethod
    def of(cls, identifier: Callable[..., Any], *args: Any, **kwargs: Any) -> Entry:
        return cls(identifier, args, kwargs)

    @property
    def name(self) -> str:
        return getattr(self.identifier, "__qualname__", None) or repr(self.identifier)

    def matches(self, identifier: Any) -> bool:
        return self.identifier == identifier

    def make_new(self) -> Any:
        """Build a fresh stage instance from the stored arguments."""
        return self.identifier(*self.args, **self.kwargs)

    def __repr__(self) -> str:
        parts = [repr(a) for a in self.args]
        parts.extend(f"{k}={v!r}" for k, v in self.kwargs.items())
        return f"Entry({self.name}({', '.join(parts)}))"
