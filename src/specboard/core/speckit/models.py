"""
Pydantic models for spec-kit projects.

These models describe one scan of a spec-kit project directory:
- Project: The project root with its ordered features and constitution
- Feature: One feature directory under specs/ with parsed artifacts
- Task/TaskPhase/TaskGroup: Task list parsed from tasks.md
- UserStory, TechnicalContext, ClarificationSession: Parsed spec/plan content
- Constitution: Project-level principles and governance sections
- SpecKitFile: Auxiliary files (research, data model, contracts, checklists)
- DashboardMetrics: Roll-ups derived from a Project

Every record is built fresh by a scan and treated as a read-only snapshot.
Fields are snake_case in Python and serialize to camelCase for the web UI
(use ``model_dump(by_alias=True)``).
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SpecKitModel(BaseModel):
    """Base model with camelCase serialization aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class FeatureStage(str, Enum):
    """Workflow position of a feature.

    Stages follow the spec-kit command sequence:
    - SPECIFY: Spec written (or not yet), nothing further
    - PLAN: plan.md exists, no task list yet
    - TASKS: tasks.md exists, no task started
    - IMPLEMENT: At least one task done or in progress
    - COMPLETE: Every task in tasks.md is done
    """

    SPECIFY = "specify"
    PLAN = "plan"
    TASKS = "tasks"
    IMPLEMENT = "implement"
    COMPLETE = "complete"

    @property
    def label(self) -> str:
        """Human-readable stage label."""
        return self.value.capitalize()


class Priority(str, Enum):
    """User story priority (P1 is highest)."""

    P1 = "P1"
    P2 = "P2"
    P3 = "P3"


class SpecKitFileType(str, Enum):
    """Type tags for feature files beyond spec/plan/tasks."""

    RESEARCH = "research"
    DATA_MODEL = "data-model"
    QUICKSTART = "quickstart"
    CONTRACT = "contract"
    CHECKLIST = "checklist"


class Task(SpecKitModel):
    """A single task line from tasks.md.

    Example:
        >>> task = Task(id="T003", description="Implement login form",
        ...             completed=True, parallel=True, user_story="US1",
        ...             file_path="src/login.ts")
    """

    id: str = Field(..., description="Task identifier (e.g., T001)")
    description: str = Field(default="", description="Task description text")
    completed: bool = Field(default=False, description="Checkbox is checked")
    parallel: bool = Field(default=False, description="Marked [P] for parallel execution")
    user_story: str | None = Field(default=None, description="Owning user story id (e.g., US1)")
    file_path: str | None = Field(default=None, description="File the task refers to")
    in_progress: bool = Field(
        default=False, description="Checkbox uses a partial marker ([~], [-] or [/])"
    )
    line: int | None = Field(default=None, ge=0, description="0-based line index in tasks.md")


class TaskPhase(SpecKitModel):
    """Tasks under one heading of tasks.md."""

    name: str
    tasks: list[Task] = Field(default_factory=list)


class TaskGroup(SpecKitModel):
    """Tasks sharing a user story tag."""

    story_id: str | None = Field(default=None, description="US1, US2, ... or None for untagged")
    story_title: str = Field(..., description="Title from spec.md or a fallback label")
    tasks: list[Task] = Field(default_factory=list)
    completed_count: int = Field(default=0, ge=0)
    total_count: int = Field(default=0, ge=0)


class PhaseGrouping(SpecKitModel):
    kind: Literal["phases"] = "phases"
    phases: list[TaskPhase] = Field(default_factory=list)


class StoryGrouping(SpecKitModel):
    kind: Literal["groups"] = "groups"
    groups: list[TaskGroup] = Field(default_factory=list)


class NoGrouping(SpecKitModel):
    kind: Literal["none"] = "none"


TaskGrouping = Annotated[
    PhaseGrouping | StoryGrouping | NoGrouping,
    Field(discriminator="kind"),
]


class UserStory(SpecKitModel):
    """A prioritized user story from spec.md."""

    id: str = Field(..., description="Story id (US1, US2, ...)")
    title: str
    priority: Priority = Priority.P3
    description: str = ""
    acceptance_criteria: list[str] = Field(default_factory=list)


class TechnicalContext(SpecKitModel):
    """Technical Context block of plan.md. Unknown fields are empty strings."""

    language: str = ""
    dependencies: list[str] = Field(default_factory=list)
    storage: str = ""
    testing: str = ""
    platform: str = ""


class Clarification(SpecKitModel):
    question: str
    answer: str


class ClarificationSession(SpecKitModel):
    """A dated block of Q/A pairs. ``date`` is YYYY-MM-DD or empty."""

    date: str = ""
    clarifications: list[Clarification] = Field(default_factory=list)


class ConstitutionPrinciple(SpecKitModel):
    name: str
    description: str = ""


class ConstitutionSection(SpecKitModel):
    name: str
    content: str = ""


class Constitution(SpecKitModel):
    """Parsed constitution.md."""

    raw_content: str = ""
    principles: list[ConstitutionPrinciple] = Field(default_factory=list)
    sections: list[ConstitutionSection] = Field(default_factory=list)
    version: str | None = None
    ratified_date: str | None = None
    last_amended_date: str | None = None


class SpecKitFile(SpecKitModel):
    """Handle to an auxiliary feature file."""

    type: SpecKitFileType
    path: str
    content: str = ""
    exists: bool = False


class Feature(SpecKitModel):
    """One feature directory with its parsed artifacts and derived progress."""

    id: str = Field(..., description="Directory name (stable across scans)")
    name: str = Field(..., description="Display name")
    path: str
    stage: FeatureStage = FeatureStage.SPECIFY

    has_spec: bool = False
    has_plan: bool = False
    has_tasks: bool = False

    tasks: list[Task] = Field(default_factory=list)
    phases: list[TaskPhase] = Field(default_factory=list)
    task_groups: list[TaskGroup] = Field(default_factory=list)
    grouping: TaskGrouping = Field(default_factory=NoGrouping)
    total_tasks: int = Field(default=0, ge=0)
    completed_tasks: int = Field(default=0, ge=0)
    in_progress_tasks: int = Field(default=0, ge=0)

    clarification_sessions: list[ClarificationSession] = Field(default_factory=list)
    total_clarifications: int = Field(default=0, ge=0)

    user_stories: list[UserStory] = Field(default_factory=list)
    technical_context: TechnicalContext | None = None
    spec_content: str | None = None
    plan_content: str | None = None
    additional_files: list[SpecKitFile] = Field(default_factory=list)

    has_checklists: bool = False
    total_checklist_items: int = Field(default=0, ge=0)
    completed_checklist_items: int = Field(default=0, ge=0)

    @property
    def all_tasks_complete(self) -> bool:
        return self.total_tasks > 0 and self.completed_tasks == self.total_tasks

    def files_of_type(self, file_type: SpecKitFileType) -> list[SpecKitFile]:
        return [f for f in self.additional_files if f.type == file_type]


class Project(SpecKitModel):
    """Snapshot of a whole spec-kit project, replaced wholesale on each scan."""

    path: str
    name: str
    features: list[Feature] = Field(default_factory=list)
    last_updated: datetime
    constitution: Constitution | None = None
    has_constitution: bool = False

    def get_feature(self, feature_id: str) -> Feature | None:
        for feature in self.features:
            if feature.id == feature_id:
                return feature
        return None


class DashboardMetrics(SpecKitModel):
    """Dashboard roll-ups derived from a Project."""

    total_features: int = 0
    features_by_stage: dict[FeatureStage, int] = Field(
        default_factory=lambda: {stage: 0 for stage in FeatureStage}
    )
    total_tasks: int = 0
    completed_tasks: int = 0
    in_progress_tasks: int = 0
    pending_tasks: int = 0
    completion_percentage: int = Field(default=0, ge=0, le=100)
    tasks_by_phase: dict[str, int] = Field(default_factory=dict)
    total_clarifications: int = 0
    clarifications_by_feature: dict[str, int] = Field(default_factory=dict)


class UpdateEvent(SpecKitModel):
    """Message pushed to change-pipeline subscribers."""

    type: Literal["update", "error", "connected"] = "update"
    data: Project | None = None
    error: str | None = None


class ToggleResult(SpecKitModel):
    """Result of toggling a checkbox in in-memory content."""

    success: bool
    content: str
    new_state: bool | None = None
    error: str | None = None


class FileToggleResult(SpecKitModel):
    """Result of toggling a checkbox in a file on disk."""

    success: bool
    new_state: bool | None = None
    error: str | None = None
