"""
Feature assembly for spec-kit feature directories.

Builds one Feature record from a directory like specs/001-user-auth/:

    spec.md          -> user stories, clarifications, raw spec content
    plan.md          -> technical context, raw plan content
    tasks.md         -> tasks, phases, user-story groups, counts
    research.md      -> SpecKitFile(research)
    data-model.md    -> SpecKitFile(data-model)
    quickstart.md    -> SpecKitFile(quickstart)
    contracts/**     -> SpecKitFile(contract), one per file
    checklists/*.md  -> SpecKitFile(checklist), one per file
    *checklist*.md   -> SpecKitFile(checklist)

A file that cannot be read (permissions, bad encoding) counts as absent;
one bad file never aborts the feature. The stage is derived from presence
flags and task completion by compute_stage(), the only place a stage is
decided.
"""

import logging
import re
from pathlib import Path

from specboard.core.speckit.models import (
    Feature,
    FeatureStage,
    NoGrouping,
    PhaseGrouping,
    SpecKitFile,
    SpecKitFileType,
    StoryGrouping,
    Task,
)
from specboard.core.speckit.parsers import (
    build_task_groups,
    count_checklist_items,
    parse_clarifications,
    parse_tasks,
    parse_technical_context,
    parse_user_stories,
)

logger = logging.getLogger(__name__)

SPEC_FILE = "spec.md"
PLAN_FILE = "plan.md"
TASKS_FILE = "tasks.md"

FIXED_FILES: dict[str, SpecKitFileType] = {
    "research.md": SpecKitFileType.RESEARCH,
    "data-model.md": SpecKitFileType.DATA_MODEL,
    "quickstart.md": SpecKitFileType.QUICKSTART,
}
CONTRACTS_DIR = "contracts"
CHECKLISTS_DIR = "checklists"
CHECKLIST_GLOB = "*checklist*.md"

NUMERIC_PREFIX_PATTERN = re.compile(r"^\d+[-_ ]+")


def read_markdown(path: Path) -> str | None:
    """
    Read a text file, treating any failure as absence.

    Args:
        path: File to read

    Returns:
        File content, or None if missing, not a file, or unreadable
    """
    try:
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Cannot read {path}: {e}. Treating as absent.")
        return None


def display_name(directory_name: str) -> str:
    """
    Derive a display name from a feature directory name.

    Example:
        >>> display_name("001-user-auth")
        'User Auth'
    """
    stripped = NUMERIC_PREFIX_PATTERN.sub("", directory_name) or directory_name
    words = re.split(r"[-_\s]+", stripped)
    return " ".join(word[:1].upper() + word[1:] for word in words if word)


def compute_stage(
    has_spec: bool,
    has_plan: bool,
    has_tasks: bool,
    tasks: list[Task],
) -> FeatureStage:
    """
    Derive a feature's workflow stage.

    Rules, first match wins:
    1. tasks.md present and every task done (at least one) -> COMPLETE
    2. tasks.md present and any task done or in progress -> IMPLEMENT
    3. tasks.md present -> TASKS
    4. plan.md present -> PLAN
    5. otherwise -> SPECIFY

    Args:
        has_spec: spec.md was read
        has_plan: plan.md was read
        has_tasks: tasks.md was read
        tasks: Tasks parsed from tasks.md

    Returns:
        The feature's stage
    """
    if has_tasks:
        completed = sum(1 for task in tasks if task.completed)
        if tasks and completed == len(tasks):
            return FeatureStage.COMPLETE
        if completed > 0 or any(task.in_progress for task in tasks):
            return FeatureStage.IMPLEMENT
        return FeatureStage.TASKS
    if has_plan:
        return FeatureStage.PLAN
    return FeatureStage.SPECIFY


class FeatureAssembler:
    """
    Assemble Feature records from feature directories.

    Example:
        >>> assembler = FeatureAssembler()
        >>> feature = assembler.assemble(Path("specs/001-user-auth"))
        >>> print(f"{feature.id}: {feature.stage.value} "
        ...       f"({feature.completed_tasks}/{feature.total_tasks})")
    """

    def assemble(self, feature_dir: Path) -> Feature:
        """
        Build the Feature record for one directory.

        Args:
            feature_dir: Path to specs/<feature>/

        Returns:
            Feature with every readable artifact parsed
        """
        feature_dir = Path(feature_dir)

        spec_content = read_markdown(feature_dir / SPEC_FILE)
        plan_content = read_markdown(feature_dir / PLAN_FILE)
        tasks_content = read_markdown(feature_dir / TASKS_FILE)

        has_spec = spec_content is not None
        has_plan = plan_content is not None
        has_tasks = tasks_content is not None

        user_stories = parse_user_stories(spec_content) if spec_content else []
        sessions = parse_clarifications(spec_content) if spec_content else []
        technical_context = parse_technical_context(plan_content) if plan_content else None

        parsed = parse_tasks(tasks_content or "")
        tasks = parsed.tasks
        groups = build_task_groups(tasks, user_stories)

        grouping: StoryGrouping | PhaseGrouping | NoGrouping
        if groups:
            grouping = StoryGrouping(groups=groups)
        elif parsed.has_phase_headings and parsed.phases:
            grouping = PhaseGrouping(phases=parsed.phases)
        else:
            grouping = NoGrouping()

        additional_files = self._load_additional_files(feature_dir)
        checklists = [f for f in additional_files if f.type == SpecKitFileType.CHECKLIST]
        checklist_total = 0
        checklist_completed = 0
        for checklist in checklists:
            total, completed = count_checklist_items(checklist.content)
            checklist_total += total
            checklist_completed += completed

        feature = Feature(
            id=feature_dir.name,
            name=display_name(feature_dir.name),
            path=str(feature_dir),
            stage=compute_stage(has_spec, has_plan, has_tasks, tasks),
            has_spec=has_spec,
            has_plan=has_plan,
            has_tasks=has_tasks,
            tasks=tasks,
            phases=parsed.phases,
            task_groups=groups,
            grouping=grouping,
            total_tasks=len(tasks),
            completed_tasks=sum(1 for task in tasks if task.completed),
            in_progress_tasks=sum(1 for task in tasks if task.in_progress),
            clarification_sessions=sessions,
            total_clarifications=sum(len(s.clarifications) for s in sessions),
            user_stories=user_stories,
            technical_context=technical_context,
            spec_content=spec_content,
            plan_content=plan_content,
            additional_files=additional_files,
            has_checklists=bool(checklists),
            total_checklist_items=checklist_total,
            completed_checklist_items=checklist_completed,
        )
        logger.debug(
            f"Assembled feature {feature.id}: stage={feature.stage.value} "
            f"tasks={feature.completed_tasks}/{feature.total_tasks}"
        )
        return feature

    def _load_additional_files(self, feature_dir: Path) -> list[SpecKitFile]:
        """Collect research/data-model/quickstart, contracts and checklists."""
        files: list[SpecKitFile] = []

        for filename, file_type in FIXED_FILES.items():
            path = feature_dir / filename
            content = read_markdown(path)
            files.append(
                SpecKitFile(
                    type=file_type,
                    path=str(path),
                    content=content or "",
                    exists=content is not None,
                )
            )

        for path in self._list_files(feature_dir / CONTRACTS_DIR, recursive=True):
            content = read_markdown(path)
            if content is not None:
                files.append(
                    SpecKitFile(
                        type=SpecKitFileType.CONTRACT, path=str(path), content=content, exists=True
                    )
                )

        checklist_paths = self._list_files(feature_dir / CHECKLISTS_DIR, pattern="*.md")
        checklist_paths += self._list_files(feature_dir, pattern=CHECKLIST_GLOB)
        for path in checklist_paths:
            content = read_markdown(path)
            if content is not None:
                files.append(
                    SpecKitFile(
                        type=SpecKitFileType.CHECKLIST, path=str(path), content=content, exists=True
                    )
                )

        return files

    def _list_files(
        self, directory: Path, pattern: str = "*", recursive: bool = False
    ) -> list[Path]:
        """Sorted non-hidden files in ``directory``; empty if it is unreadable."""
        try:
            if not directory.is_dir():
                return []
            candidates = directory.rglob(pattern) if recursive else directory.glob(pattern)
            return sorted(
                path
                for path in candidates
                if path.is_file()
                and not any(part.startswith(".") for part in path.relative_to(directory).parts)
            )
        except OSError as e:
            logger.warning(f"Cannot list {directory}: {e}")
            return []
