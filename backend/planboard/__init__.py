"""
Planboard - workload planning over a task tree.

Computes per-person daily workload from task dates, effort and
assignees under a business calendar, with cycle-safe hierarchy edits,
ancestor-preserving filters and bounded undo/redo.
"""

__version__ = "0.1.0"
