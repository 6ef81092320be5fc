"""
specboard - Live dashboard for spec-kit projects

Scans a directory of spec-kit markdown (specs/<feature>/spec.md, plan.md,
tasks.md, ...) into typed records, derives workflow stage and progress,
and keeps subscribers up to date as the files change.
"""

__version__ = "0.3.0"

# Re-export core models for convenience
from specboard.core.config.models import SpecboardConfig
from specboard.core.speckit.models import Feature, FeatureStage, Project, Task

__all__ = ["Feature", "FeatureStage", "Project", "SpecboardConfig", "Task", "__version__"]
