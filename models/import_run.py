from sqlalchemy import Column, BigInteger, String, Enum, DateTime, Float, Integer, Text, Index, Uuid
from datetime import datetime
import uuid
from models.base import Base, ImportStatus, enum_values


class ImportRun(Base):
    """
    Tracks metadata for each import job execution.

    Purpose:
    - Audit trail of full-replace runs per source tag
    - Shows a source left empty by a run that failed after its delete
    - Feeds the /health endpoint
    """
    __tablename__ = "import_runs"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    run_id = Column(Uuid, default=uuid.uuid4, unique=True, nullable=False, index=True)

    source = Column(String(100), nullable=False, index=True)
    file_path = Column(String(500), nullable=True)

    status = Column(
        Enum(ImportStatus, name="import_status", values_callable=enum_values),
        default=ImportStatus.RUNNING, nullable=False, index=True
    )

    # Timestamps
    started_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    completed_at = Column(DateTime, nullable=True)
    duration_seconds = Column(Float, nullable=True)

    # Statistics
    records_read = Column(Integer, default=0)
    records_inserted = Column(Integer, default=0)
    records_skipped = Column(Integer, default=0)

    error_message = Column(Text, nullable=True)

    __table_args__ = (
        Index("idx_import_run_source_started", "source", "started_at"),
    )
