"""Application services."""

from .planning import (
    PlanningService,
    configure_planning_service,
    get_planning_service,
    reset_planning_state,
)

__all__ = [
    "PlanningService",
    "configure_planning_service",
    "get_planning_service",
    "reset_planning_state",
]
