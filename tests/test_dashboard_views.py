"""
Tests for dashboard metrics and the board view.
"""

from datetime import datetime, timezone

from specboard.core.dashboard.board import BoardColumnId, build_board, feature_column
from specboard.core.speckit.metrics import (
    completion_percentage,
    compute_metrics,
    normalize_phase_name,
)
from specboard.core.speckit.models import Feature, FeatureStage, Project, Task, TaskPhase
from specboard.core.speckit.scanner import ProjectScanner


def _feature(feature_id: str, stage: FeatureStage, **kwargs) -> Feature:
    return Feature(id=feature_id, name=feature_id, path=f"/p/{feature_id}", stage=stage, **kwargs)


def _project(*features: Feature) -> Project:
    return Project(
        path="/p",
        name="p",
        features=list(features),
        last_updated=datetime.now(timezone.utc),
    )


class TestMetricsHelpers:
    """Tests for metric helper functions."""

    def test_normalize_phase_name(self):
        """Test parenthetical suffixes are dropped."""
        assert normalize_phase_name("Phase 3: User Story 1 (Priority: P1)") == "Phase 3: User Story 1"
        assert normalize_phase_name("Setup") == "Setup"

    def test_completion_percentage(self):
        """Test rounding and the zero-total case."""
        assert completion_percentage(0, 0) == 0
        assert completion_percentage(1, 3) == 33
        assert completion_percentage(2, 3) == 67
        assert completion_percentage(4, 4) == 100


class TestComputeMetrics:
    """Tests for compute_metrics()."""

    def test_none_project_is_all_zero(self):
        """Test metrics for no project."""
        metrics = compute_metrics(None)

        assert metrics.total_features == 0
        assert metrics.completion_percentage == 0
        assert set(metrics.features_by_stage) == set(FeatureStage)
        assert all(count == 0 for count in metrics.features_by_stage.values())
        assert metrics.tasks_by_phase == {}

    def test_worked_example(self):
        """Test two features with 10 and 5 tasks."""
        project = _project(
            _feature("001-a", FeatureStage.IMPLEMENT, total_tasks=10, completed_tasks=5),
            _feature("002-b", FeatureStage.COMPLETE, total_tasks=5, completed_tasks=5),
        )

        metrics = compute_metrics(project)

        assert metrics.total_features == 2
        assert metrics.total_tasks == 15
        assert metrics.completed_tasks == 10
        assert metrics.pending_tasks == 5
        assert metrics.completion_percentage == 67
        assert metrics.features_by_stage[FeatureStage.IMPLEMENT] == 1
        assert metrics.features_by_stage[FeatureStage.COMPLETE] == 1
        assert metrics.features_by_stage[FeatureStage.SPECIFY] == 0

    def test_phases_merge_after_normalization(self):
        """Test phases that differ only by suffix share a bucket."""
        project = _project(
            _feature(
                "001-a",
                FeatureStage.TASKS,
                phases=[TaskPhase(name="Setup (shared)", tasks=[Task(id="T001"), Task(id="T002")])],
            ),
            _feature(
                "002-b",
                FeatureStage.TASKS,
                phases=[TaskPhase(name="Setup", tasks=[Task(id="T001")])],
            ),
        )

        assert compute_metrics(project).tasks_by_phase == {"Setup": 3}

    def test_scanned_project(self, speckit_project):
        """Test metrics over a scanned project."""
        metrics = compute_metrics(ProjectScanner().scan(speckit_project))

        assert metrics.total_tasks == 5
        assert metrics.completed_tasks == 3
        assert metrics.completion_percentage == 60
        assert metrics.total_clarifications == 3
        assert metrics.clarifications_by_feature == {"001-user-auth": 3, "002-reporting": 0}
        assert metrics.tasks_by_phase["Phase 2: User Story 1 - Login"] == 2

    def test_deterministic(self, speckit_project):
        """Test the same project yields equal metrics."""
        project = ProjectScanner().scan(speckit_project)
        assert compute_metrics(project) == compute_metrics(project)


class TestBoard:
    """Tests for build_board() and feature_column()."""

    def test_stage_columns(self):
        """Test each stage maps to its column."""
        assert feature_column(_feature("a", FeatureStage.SPECIFY)) == BoardColumnId.BACKLOG
        assert feature_column(_feature("a", FeatureStage.PLAN)) == BoardColumnId.BACKLOG
        assert feature_column(_feature("a", FeatureStage.TASKS)) == BoardColumnId.IN_PROGRESS
        assert feature_column(_feature("a", FeatureStage.IMPLEMENT)) == BoardColumnId.IN_PROGRESS
        assert feature_column(_feature("a", FeatureStage.COMPLETE)) == BoardColumnId.DONE

    def test_open_checklists_hold_in_review(self):
        """Test a complete feature with unchecked checklist items is in review."""
        feature = _feature(
            "a",
            FeatureStage.COMPLETE,
            has_checklists=True,
            total_checklist_items=4,
            completed_checklist_items=3,
        )
        assert feature_column(feature) == BoardColumnId.REVIEW

    def test_empty_board_has_all_columns(self):
        """Test every column is present even without a project."""
        board = build_board(None)

        assert [c.id for c in board.columns] == list(BoardColumnId)
        assert [c.title for c in board.columns] == ["Backlog", "In Progress", "Review", "Done"]
        assert all(c.count == 0 for c in board.columns)
        assert board.project_name is None

    def test_cards_keep_feature_order(self):
        """Test cards appear in feature order with progress filled in."""
        project = _project(
            _feature("001-a", FeatureStage.PLAN),
            _feature("002-b", FeatureStage.IMPLEMENT, total_tasks=4, completed_tasks=1),
            _feature("003-c", FeatureStage.SPECIFY),
        )

        board = build_board(project)

        backlog = board.columns[0]
        assert [card.id for card in backlog.cards] == ["001-a", "003-c"]
        assert backlog.count == 2
        assert board.columns[1].cards[0].progress == 25
