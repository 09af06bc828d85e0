"""Distribute work from a shared staging branch into per-branch git worktrees."""

__version__ = "0.1.0"
