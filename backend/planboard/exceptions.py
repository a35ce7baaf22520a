"""
Structured exceptions for Planboard.

Most of the engine degrades silently (missing dates give zero load,
empty rollups leave fields unset). Exceptions are reserved for:
- Hierarchy mutations that would create a cycle
- Traversals that run into already-corrupted parent chains
- Lookups and dispatches the caller got wrong
"""

from typing import Any, Dict, List, Optional


class PlanboardException(Exception):
    """Base exception for all Planboard errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "internal_error",
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Structured form for callers that surface errors to a UI."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class TaskNotFoundError(PlanboardException):
    """Task id does not resolve."""

    def __init__(self, task_id: str):
        super().__init__(
            message=f"Task with ID {task_id} not found",
            error_code="not_found",
        )
        self.task_id = task_id


class HierarchyCycleError(PlanboardException):
    """A parent assignment or an existing parent chain forms a cycle."""

    def __init__(self, task_id: str, parent_id: Optional[str] = None):
        if parent_id is None:
            msg = f"Parent chain of task {task_id} loops back on itself"
        else:
            msg = f"Making {parent_id} the parent of {task_id} would create a cycle"
        super().__init__(
            message="Cannot move task: would create circular dependency",
            error_code="cycle_detected",
            details=[{"loc": ["parent_id"], "msg": msg, "type": "cycle_error"}],
        )
        self.task_id = task_id
        self.parent_id = parent_id


class InvalidActionError(PlanboardException):
    """The reducer was handed an action type it does not know."""

    def __init__(self, action_type: str):
        super().__init__(
            message=f"Unknown action type: {action_type}",
            error_code="invalid_action",
        )
        self.action_type = action_type
