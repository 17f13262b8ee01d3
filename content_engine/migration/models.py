"""
Migration data models.
Records, per-record results, running status and run configuration.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from config.constants import MIGRATION_BATCH_DELAY_SECONDS, MIGRATION_BATCH_SIZE


class RecordState(Enum):
    """Terminal state of one record (every record starts pending)."""
    PENDING = "pending"
    CONVERTED = "converted"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ContentRecord:
    """A legacy content record supplied by the persistence layer."""
    id: str
    title: str = ""
    content: Optional[str] = ""
    description: str = ""
    owner_id: Optional[str] = None
    folder_id: Optional[str] = None
    project_id: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ContentRecord':
        """Build a record from a loosely-shaped dict (unknown keys ignored)."""
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            content=data.get("content"),
            description=data.get("description") or "",
            owner_id=data.get("owner_id"),
            folder_id=data.get("folder_id"),
            project_id=data.get("project_id"),
            tags=list(data.get("tags") or []),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MigrationResult:
    """Outcome for one record; immutable once created."""
    id: str
    success: bool
    original_format: str
    final_format: str
    issues: Tuple[str, ...] = ()
    migrated_content: Optional[str] = None
    error: Optional[str] = None
    state: RecordState = RecordState.CONVERTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "success": self.success,
            "original_format": self.original_format,
            "final_format": self.final_format,
            "issues": list(self.issues),
            "migrated_content": self.migrated_content,
            "error": self.error,
            "state": self.state.value,
        }


@dataclass
class MigrationStatus:
    """Running counters, updated per record by the batch driver."""
    total: int = 0
    migrated: int = 0
    failed: int = 0
    skipped: int = 0
    in_progress: int = 0

    @property
    def completed(self) -> int:
        return self.migrated + self.failed + self.skipped

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class MigrationConfig:
    """Configuration for one migration run."""
    batch_size: int = MIGRATION_BATCH_SIZE
    batch_delay: float = MIGRATION_BATCH_DELAY_SECONDS
    enable_backup: bool = True
    dry_run: bool = False
    content_validation: bool = True

    def __post_init__(self):
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.batch_delay < 0:
            raise ValueError(f"batch_delay cannot be negative, got {self.batch_delay}")

    @classmethod
    def from_settings(cls, settings) -> 'MigrationConfig':
        return cls(
            batch_size=settings.migration_batch_size,
            batch_delay=settings.migration_batch_delay,
            enable_backup=settings.migration_enable_backup,
            dry_run=settings.migration_dry_run,
            content_validation=settings.strict_content_validation,
        )


@dataclass
class MigrationBatchOutcome:
    """
    Everything a batch run produced.

    dry_run=True tells the caller that no persistence write should occur.
    """
    results: List[MigrationResult]
    status: MigrationStatus
    dry_run: bool = False
    backup: Optional[str] = None


@dataclass
class IntegrityReport:
    """Outcome of comparing original records with migration results."""
    is_valid: bool
    issues: List[str] = field(default_factory=list)
    total_checked: int = 0
    passed: int = 0
    failed: int = 0

    @property
    def summary(self) -> Dict[str, int]:
        return {
            "total_checked": self.total_checked,
            "passed": self.passed,
            "failed": self.failed,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {"is_valid": self.is_valid, "issues": list(self.issues), "summary": self.summary}


# Called after each record: (status, result)
MigrationProgressCallback = Callable[[MigrationStatus, MigrationResult], None]
