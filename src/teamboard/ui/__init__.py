"""UI components."""

from .screens import DashboardScreen, PasswordScreen, WorkItemsScreen

__all__ = ["DashboardScreen", "PasswordScreen", "WorkItemsScreen"]
