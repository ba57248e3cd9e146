"""Named chains and config-driven chain construction."""

from __future__ import annotations

import importlib
from collections.abc import Callable
from typing import Any

from loguru import logger

from stagechain.config.schema import ChainConfig, Config
from stagechain.core.chain import Chain


class StageLoadError(ValueError):
    """Raised when a configured stage path cannot be resolved."""


class ChainNotFoundError(KeyError):
    """Raised when a named chain is not registered."""


def load_stage(path: str) -> Callable[..., Any]:
    """Resolve ``pkg.module:Name`` or ``pkg.module.Name`` to a callable."""
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")
    if not module_name or not attr_path:
        raise StageLoadError(f"invalid stage path: {path!r}")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise StageLoadError(f"cannot import {module_name!r} for stage {path!r}: {e}") from e

    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as e:
            raise StageLoadError(f"stage {path!r} not found: {e}") from e

    if not callable(target):
        raise StageLoadError(f"stage {path!r} is not callable")
    return target


def build_chain(config: ChainConfig) -> Chain:
    """Build a chain from its declarative configuration."""
    chain = Chain(relocation=config.relocation)
    for stage in config.stages:
        if not stage.enabled:
            continue
        identifier = load_stage(stage.stage)
        if stage.before:
            chain.insert_before(load_stage(stage.before), identifier, *stage.args, **stage.kwargs)
        elif stage.after:
            chain.insert_after(load_stage(stage.after), identifier, *stage.args, **stage.kwargs)
        else:
            chain.add(identifier, *stage.args, **stage.kwargs)
    return chain


class ChainRegistry:
    """Process-wide (or per-subsystem) holder of named chains."""

    def __init__(self) -> None:
        self._chains: dict[str, Chain] = {}

    def chain(self, name: str, *, create: bool = True) -> Chain:
        """Return the chain called ``name``, creating an empty one if allowed."""
        existing = self._chains.get(name)
        if existing is not None:
            return existing
        if not create:
            raise ChainNotFoundError(name)
        chain = Chain()
        self._chains[name] = chain
        return chain

    def configure(self, name: str, builder: Callable[[Chain], None]) -> Chain:
        """Hand the named chain to ``builder`` for population."""
        chain = self.chain(name)
        builder(chain)
        logger.info("chain {} configured: {!r}", name, chain)
        return chain

    def load(self, config: Config) -> None:
        """Build every configured chain, replacing chains with the same name."""
        for name, chain_config in config.chains.items():
            self._chains[name] = build_chain(chain_config)
            logger.info("chain {} loaded from config with {} stage(s)", name, len(self._chains[name]))

    def names(self) -> list[str]:
        return sorted(self._chains)

    def reset(self) -> None:
        self._chains.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._chains


default_registry = ChainRegistry()


def configure(name: str, builder: Callable[[Chain], None]) -> Chain:
    """Configure a chain on the default registry."""
    return default_registry.configure(name, builder)
