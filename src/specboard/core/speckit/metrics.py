"""
Dashboard metrics derived from a Project snapshot.

compute_metrics() is a pure function: the same Project always yields the
same DashboardMetrics, with no hidden state.
"""

from specboard.core.speckit.models import DashboardMetrics, FeatureStage, Project


def normalize_phase_name(name: str) -> str:
    """
    Strip a parenthetical suffix from a phase name.

    Example:
        >>> normalize_phase_name("Phase 3: User Story 1 (Priority: P1)")
        'Phase 3: User Story 1'
    """
    return name.split("(", 1)[0].strip()


def completion_percentage(completed: int, total: int) -> int:
    """Rounded completion percentage; 0 when there is nothing to complete."""
    if total <= 0:
        return 0
    return round(completed / total * 100)


def compute_metrics(project: Project | None) -> DashboardMetrics:
    """
    Roll a project up into dashboard metrics.

    Args:
        project: Project snapshot, or None when no data has been loaded

    Returns:
        DashboardMetrics (all zeros for None)
    """
    if project is None:
        return DashboardMetrics()

    features_by_stage = {stage: 0 for stage in FeatureStage}
    tasks_by_phase: dict[str, int] = {}
    clarifications_by_feature: dict[str, int] = {}
    total_tasks = 0
    completed_tasks = 0
    in_progress_tasks = 0
    total_clarifications = 0

    for feature in project.features:
        features_by_stage[feature.stage] += 1
        total_tasks += feature.total_tasks
        completed_tasks += feature.completed_tasks
        in_progress_tasks += feature.in_progress_tasks
        total_clarifications += feature.total_clarifications
        clarifications_by_feature[feature.id] = feature.total_clarifications

        for phase in feature.phases:
            phase_name = normalize_phase_name(phase.name)
            tasks_by_phase[phase_name] = tasks_by_phase.get(phase_name, 0) + len(phase.tasks)

    return DashboardMetrics(
        total_features=len(project.features),
        features_by_stage=features_by_stage,
        total_tasks=total_tasks,
        completed_tasks=completed_tasks,
        in_progress_tasks=in_progress_tasks,
        pending_tasks=total_tasks - completed_tasks,
        completion_percentage=completion_percentage(completed_tasks, total_tasks),
        tasks_by_phase=tasks_by_phase,
        total_clarifications=total_clarifications,
        clarifications_by_feature=clarifications_by_feature,
    )
