"""Ready-made stages that can be registered on any chain."""

from stagechain.stages.timing import TimingStage

__all__ = ["TimingStage"]
