"""Service layer for business logic."""

from .auth_service import AuthService
from .dashboard_service import DashboardService, DashboardSummary
from .entity_store import EntityStore
from .filter_service import ALL, UNASSIGNED, FilterService, WorkItemFilter
from .reorder import DragPhase, DragReorderEngine, reorder_ids
from .sprint_navigator import SprintNavigator, default_start_date
from .tree import TreeProjector, TreeRow, descendant_ids

__all__ = [
    "ALL",
    "UNASSIGNED",
    "AuthService",
    "DashboardService",
    "DashboardSummary",
    "DragPhase",
    "DragReorderEngine",
    "EntityStore",
    "FilterService",
    "SprintNavigator",
    "TreeProjector",
    "TreeRow",
    "WorkItemFilter",
    "default_start_date",
    "descendant_ids",
    "reorder_ids",
]
