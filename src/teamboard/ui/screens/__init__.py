"""Screen components."""

from .dashboard import DashboardScreen
from .password import PasswordScreen
from .work_items import WorkItemsScreen

__all__ = ["DashboardScreen", "PasswordScreen", "WorkItemsScreen"]
