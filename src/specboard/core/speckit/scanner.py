"""
Project scanning for spec-kit projects.

A directory is a spec-kit project when it contains ``specs/`` or
``.specify/``. Every non-hidden subdirectory of ``specs/`` is a feature,
ordered by name. The constitution is looked up in the usual locations.

Error handling follows the file -> feature -> project scopes:
- Unreadable files are absent (FeatureAssembler)
- A feature whose assembly raises is logged and replaced by a bare record
- An unreadable or unrecognized root yields None, never an exception

Usage:
    scanner = ProjectScanner()
    project = scanner.scan(Path("~/code/my-app").expanduser())

    # Or overlap feature reads inside an event loop
    project = await scanner.scan_async(root)
"""

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path

from specboard.core.speckit.feature import (
    FeatureAssembler,
    compute_stage,
    display_name,
    read_markdown,
)
from specboard.core.speckit.models import Constitution, Feature, Project
from specboard.core.speckit.parsers import parse_constitution
from specboard.utils.project import SPECS_DIR, is_speckit_project

logger = logging.getLogger(__name__)

CONSTITUTION_CANDIDATES: tuple[str, ...] = (
    ".specify/memory/constitution.md",
    "memory/constitution.md",
    "constitution.md",
    "specs/constitution.md",
)


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


class ProjectScanner:
    """
    Scan a project root into a Project snapshot.

    Example:
        >>> scanner = ProjectScanner()
        >>> project = scanner.scan(Path("./my-app"))
        >>> if project is None:
        ...     print("Not a spec-kit project")
        ... else:
        ...     for feature in project.features:
        ...         print(f"{feature.id}: {feature.stage.value}")
    """

    def __init__(self, assembler: FeatureAssembler | None = None) -> None:
        """
        Initialize the ProjectScanner.

        Args:
            assembler: Feature assembler to use (defaults to FeatureAssembler())
        """
        self.assembler = assembler or FeatureAssembler()

    def list_feature_dirs(self, root: Path) -> list[Path]:
        """
        List feature directories under ``root/specs``, sorted by name.

        Args:
            root: Project root

        Returns:
            Feature directory paths (empty if specs/ is missing or unreadable)
        """
        specs_dir = root / SPECS_DIR
        try:
            if not specs_dir.is_dir():
                return []
            return sorted(
                (entry for entry in specs_dir.iterdir()
                 if entry.is_dir() and not entry.name.startswith(".")),
                key=lambda p: p.name,
            )
        except OSError as e:
            logger.warning(f"Cannot list features in {specs_dir}: {e}")
            return []

    def load_constitution(self, root: Path) -> Constitution | None:
        """Parse the first constitution file found, or return None."""
        for candidate in CONSTITUTION_CANDIDATES:
            content = read_markdown(root / candidate)
            if content is not None:
                logger.debug(f"Using constitution at {root / candidate}")
                return parse_constitution(content)
        return None

    def assemble_feature(self, feature_dir: Path) -> Feature:
        """
        Assemble one feature, falling back to a bare record on failure.

        Args:
            feature_dir: Feature directory

        Returns:
            The assembled Feature, or a presence-only Feature if assembly raised
        """
        try:
            return self.assembler.assemble(feature_dir)
        except Exception as e:
            logger.error(f"Failed to assemble feature {feature_dir}: {e}")
            has_spec = _is_file(feature_dir / "spec.md")
            has_plan = _is_file(feature_dir / "plan.md")
            return Feature(
                id=feature_dir.name,
                name=display_name(feature_dir.name),
                path=str(feature_dir),
                stage=compute_stage(has_spec, has_plan, False, []),
                has_spec=has_spec,
                has_plan=has_plan,
            )

    def _resolve_root(self, root: Path | str) -> Path | None:
        try:
            resolved = Path(root).expanduser().resolve()
            if not resolved.is_dir() or not is_speckit_project(resolved):
                logger.debug(f"Not a spec-kit project: {resolved}")
                return None
            return resolved
        except OSError as e:
            logger.warning(f"Cannot read project root {root}: {e}")
            return None

    def _build_project(
        self, root: Path, features: list[Feature], constitution: Constitution | None
    ) -> Project:
        project = Project(
            path=str(root),
            name=root.name,
            features=features,
            last_updated=datetime.now(timezone.utc),
            constitution=constitution,
            has_constitution=constitution is not None,
        )
        logger.info(f"Scanned {root}: {len(features)} features")
        return project

    def scan(self, root: Path | str) -> Project | None:
        """
        Scan a project root synchronously.

        Args:
            root: Project root directory

        Returns:
            Project snapshot, or None if root is not a readable spec-kit project
        """
        resolved = self._resolve_root(root)
        if resolved is None:
            return None

        features = [self.assemble_feature(d) for d in self.list_feature_dirs(resolved)]
        return self._build_project(resolved, features, self.load_constitution(resolved))

    async def scan_async(self, root: Path | str) -> Project | None:
        """
        Scan a project root, overlapping feature reads.

        Each feature is assembled with asyncio.to_thread(); gather() keeps
        results in directory order regardless of completion order.

        Args:
            root: Project root directory

        Returns:
            Project snapshot, or None if root is not a readable spec-kit project
        """
        resolved = await asyncio.to_thread(self._resolve_root, root)
        if resolved is None:
            return None

        feature_dirs = await asyncio.to_thread(self.list_feature_dirs, resolved)
        features, constitution = await asyncio.gather(
            asyncio.gather(*(asyncio.to_thread(self.assemble_feature, d) for d in feature_dirs)),
            asyncio.to_thread(self.load_constitution, resolved),
        )
        return self._build_project(resolved, list(features), constitution)
