"""
spec-kit project model: parsing, feature assembly, scanning and metrics.

Internal modules import from submodules directly; this package re-exports
the public surface for callers.
"""

from specboard.core.speckit.checkbox import (
    get_checkbox_state,
    is_valid_checkbox_line,
    toggle_checkbox_in_content,
    toggle_checkbox_in_file,
    toggle_checkbox_line,
)
from specboard.core.speckit.feature import FeatureAssembler, compute_stage, display_name
from specboard.core.speckit.metrics import compute_metrics
from specboard.core.speckit.models import (
    DashboardMetrics,
    Feature,
    FeatureStage,
    Project,
    Task,
    UpdateEvent,
)
from specboard.core.speckit.scanner import ProjectScanner

__all__ = [
    "DashboardMetrics",
    "Feature",
    "FeatureAssembler",
    "FeatureStage",
    "Project",
    "ProjectScanner",
    "Task",
    "UpdateEvent",
    "compute_metrics",
    "compute_stage",
    "display_name",
    "get_checkbox_state",
    "is_valid_checkbox_line",
    "toggle_checkbox_in_content",
    "toggle_checkbox_in_file",
    "toggle_checkbox_line",
]
