"""Command-line interface for stagechain."""
