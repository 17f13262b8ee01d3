"""
Backup snapshots for migration runs.

create_backup() serializes a record set into a versioned JSON envelope
{version, timestamp, records[]}; rollback() parses it back into records
and raises BackupError on any corruption, so a damaged snapshot never
yields a partial record list.
"""

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError

from config.constants import BACKUP_VERSION
from config.logging_config import get_logger
from ..classifier import FormatClassifier
from ..shared import BackupError
from .models import ContentRecord

logger = get_logger(__name__)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class BackupMetadata(BaseModel):
    """Lifecycle metadata needed to reconstruct a record"""
    owner_id: Optional[str] = None
    folder_id: Optional[str] = None
    project_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class BackupRecord(BaseModel):
    """One record inside a snapshot"""
    id: str
    title: str = ""
    description: str = ""
    content: Optional[str] = None
    original_format: str = "unknown"
    metadata: BackupMetadata = Field(default_factory=BackupMetadata)


class BackupSnapshot(BaseModel):
    """Versioned snapshot envelope"""
    version: str
    timestamp: Optional[str] = None
    records: List[BackupRecord]


class BackupManager:
    """
    Creates and restores backup snapshots.

    The engine never stores snapshots; callers persist the returned string.
    """

    def __init__(self, classifier: Optional[FormatClassifier] = None):
        self.classifier = classifier or FormatClassifier()

    def create_backup(self, records: Sequence[ContentRecord]) -> str:
        """
        Serialize records into a snapshot string.

        Args:
            records: Records about to be migrated.

        Returns:
            JSON snapshot (indented for readability).
        """
        snapshot = BackupSnapshot(
            version=BACKUP_VERSION,
            timestamp=_utc_now(),
            records=[
                BackupRecord(
                    id=record.id,
                    title=record.title,
                    description=record.description,
                    content=record.content,
                    original_format=self.classifier.classify(record.content or "").format.value,
                    metadata=BackupMetadata(
                        owner_id=record.owner_id,
                        folder_id=record.folder_id,
                        project_id=record.project_id,
                        tags=list(record.tags),
                        created_at=record.created_at,
                        updated_at=record.updated_at,
                    ),
                )
                for record in records
            ],
        )
        logger.info(f"Created backup of {len(snapshot.records)} records")
        return snapshot.model_dump_json(indent=2)

    def rollback(self, snapshot) -> List[ContentRecord]:
        """
        Reconstruct records from a snapshot string.

        Raises:
            BackupError: If the snapshot is not valid JSON, lacks a
                `records` list, or any record is malformed.
        """
        if not isinstance(snapshot, (str, bytes)):
            raise BackupError("Invalid backup format")

        try:
            parsed = BackupSnapshot.model_validate_json(snapshot)
        except ValidationError as e:
            details = [
                f"{'.'.join(str(p) for p in err['loc']) or 'snapshot'}: {err['msg']}"
                for err in e.errors()
            ]
            logger.error(f"Backup snapshot rejected: {'; '.join(details)}")
            raise BackupError("Invalid backup format", details) from e

        now = _utc_now()
        records = [
            ContentRecord(
                id=item.id,
                title=item.title,
                description=item.description,
                content=item.content,
                owner_id=item.metadata.owner_id,
                folder_id=item.metadata.folder_id,
                project_id=item.metadata.project_id,
                tags=list(item.metadata.tags),
                created_at=item.metadata.created_at or now,
                updated_at=item.metadata.updated_at or now,
            )
            for item in parsed.records
        ]
        logger.info(f"Restored {len(records)} records from backup version {parsed.version}")
        return records
