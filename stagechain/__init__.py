"""stagechain - ordered onion-style middleware chains."""

from stagechain.core.chain import Chain, Continuation, Stage
from stagechain.core.entry import Entry

__version__ = "0.1.0"
__logo__ = "⛓"

__all__ = ["Chain", "Continuation", "Entry", "Stage", "__logo__", "__version__"]
