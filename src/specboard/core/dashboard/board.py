"""
Kanban board view of a project.

Columns are a presentation concern layered on top of FeatureStage:

    specify, plan     -> backlog
    tasks, implement  -> in_progress
    complete          -> done, or review while checklist items remain open

The review column never feeds back into the stage itself.
"""

from enum import Enum

from pydantic import Field

from specboard.core.speckit.metrics import completion_percentage
from specboard.core.speckit.models import Feature, FeatureStage, Project, SpecKitModel


class BoardColumnId(str, Enum):
    BACKLOG = "backlog"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    DONE = "done"

    @property
    def label(self) -> str:
        return COLUMN_TITLES[self]


COLUMN_TITLES: dict[BoardColumnId, str] = {
    BoardColumnId.BACKLOG: "Backlog",
    BoardColumnId.IN_PROGRESS: "In Progress",
    BoardColumnId.REVIEW: "Review",
    BoardColumnId.DONE: "Done",
}

STAGE_COLUMNS: dict[FeatureStage, BoardColumnId] = {
    FeatureStage.SPECIFY: BoardColumnId.BACKLOG,
    FeatureStage.PLAN: BoardColumnId.BACKLOG,
    FeatureStage.TASKS: BoardColumnId.IN_PROGRESS,
    FeatureStage.IMPLEMENT: BoardColumnId.IN_PROGRESS,
    FeatureStage.COMPLETE: BoardColumnId.DONE,
}


class BoardCard(SpecKitModel):
    """Summary of one feature as shown on a card."""

    id: str
    name: str
    stage: FeatureStage
    completed_tasks: int = 0
    total_tasks: int = 0
    progress: int = Field(default=0, ge=0, le=100)
    has_checklists: bool = False
    completed_checklist_items: int = 0
    total_checklist_items: int = 0
    checklist_progress: int = Field(default=0, ge=0, le=100)


class BoardColumn(SpecKitModel):
    id: BoardColumnId
    title: str
    cards: list[BoardCard] = Field(default_factory=list)
    count: int = 0


class Board(SpecKitModel):
    project_name: str | None = None
    columns: list[BoardColumn] = Field(default_factory=list)


def feature_column(feature: Feature) -> BoardColumnId:
    """
    Pick the board column for a feature.

    Example:
        >>> feature = Feature(id="001-a", name="A", path="/p", stage=FeatureStage.PLAN)
        >>> feature_column(feature).value
        'backlog'
    """
    column = STAGE_COLUMNS[feature.stage]
    if (
        column is BoardColumnId.DONE
        and feature.has_checklists
        and feature.completed_checklist_items < feature.total_checklist_items
    ):
        return BoardColumnId.REVIEW
    return column


def feature_card(feature: Feature) -> BoardCard:
    return BoardCard(
        id=feature.id,
        name=feature.name,
        stage=feature.stage,
        completed_tasks=feature.completed_tasks,
        total_tasks=feature.total_tasks,
        progress=completion_percentage(feature.completed_tasks, feature.total_tasks),
        has_checklists=feature.has_checklists,
        completed_checklist_items=feature.completed_checklist_items,
        total_checklist_items=feature.total_checklist_items,
        checklist_progress=completion_percentage(
            feature.completed_checklist_items, feature.total_checklist_items
        ),
    )


def build_board(project: Project | None) -> Board:
    """
    Lay a project's features out in board columns.

    Every column is present, in workflow order, even when empty. Cards keep
    the project's feature order within a column.
    """
    cards: dict[BoardColumnId, list[BoardCard]] = {column: [] for column in BoardColumnId}
    if project is not None:
        for feature in project.features:
            cards[feature_column(feature)].append(feature_card(feature))

    return Board(
        project_name=project.name if project is not None else None,
        columns=[
            BoardColumn(id=column, title=column.label, cards=cards[column], count=len(cards[column]))
            for column in BoardColumnId
        ],
    )
