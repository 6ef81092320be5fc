"""
FastAPI-based REST API for the specboard dashboard.
"""

from specboard.core.dashboard.api.app import ErrorCode, create_app
from specboard.core.dashboard.api.state import DashboardState

__all__ = ["DashboardState", "ErrorCode", "create_app"]
