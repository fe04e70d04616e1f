# ============================================================================
# File: ingestion/runner.py
# Description: Full-replace import orchestrator for one billboard source
# ============================================================================
"""
Import Runner - Orchestrates read, replace, resolve, normalize and load.

This module provides:
- Fatal configuration checks before anything is deleted
- Full replace per source tag (delete, then insert the fresh set)
- Record-level skips for unplaceable or invalid records
- Fatal, non-rolled-back batch insert failures
- An ImportRun audit row per run
"""

from typing import Dict, Any, List, Optional
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import update
import logging
import uuid

from ingestion.base import DataSource
from ingestion.resolver import CityCache, LocationResolver
from ingestion.loaders.billboard_loader import BillboardLoader
from models.import_run import ImportRun
from models.base import ImportStatus
from schemas.normalized import BillboardCreate
from core.exceptions import (
    ETLException,
    InvalidRecordError,
    LocationResolutionError,
)

logger = logging.getLogger(__name__)


class ImportRunner:
    """
    Billboard import orchestrator

    Responsibilities:
    - Read the source file (fatal on failure, nothing deleted)
    - Replace all rows of the source tag
    - Resolve and normalize every record, counting skips
    - Insert survivors in fixed-size batches
    - Record the run outcome
    """

    def __init__(self, db_session: AsyncSession, batch_size: Optional[int] = None):
        self.db = db_session
        self.batch_size = batch_size

    async def run(self, source: DataSource) -> Dict[str, Any]:
        """
        Run a full import for one source.

        Returns:
            Dictionary with run statistics:
            - status: "success"
            - source: Source tag
            - records_read: Records found in the file
            - deleted: Rows removed for the tag before inserting
            - inserted: Rows inserted
            - skipped: Records that could not be placed or normalized
            - cities_created: Cities created while resolving

        Raises:
            ConfigurationError: Missing/malformed file or missing target city
            BatchInsertError: A batch failed; earlier batches stay committed
            ETLException: Any other failure, wrapped
        """
        # --------------------------------------------------
        # PHASE 1: READ (fatal, before any store work)
        # --------------------------------------------------
        records = await source.fetch_data()
        return await self.load_records(source, records)

    async def load_records(self, source: DataSource, records: List[Any]) -> Dict[str, Any]:
        """Replace the source tag's billboards with the given raw records."""
        resolver = LocationResolver(self.db, CityCache())
        loader = BillboardLoader(self.db, batch_size=self.batch_size)

        await source.prepare(resolver)

        run_pk, started_at = await self._start_run(source, len(records))
        inserted = 0
        skipped = 0

        try:
            # --------------------------------------------------
            # PHASE 2: DELETE EXISTING ROWS FOR THE TAG
            # --------------------------------------------------
            deleted = await loader.delete_source(source.source_tag)

            # --------------------------------------------------
            # PHASE 3: RESOLVE + NORMALIZE
            # --------------------------------------------------
            rows: List[BillboardCreate] = []

            for record in records:
                if not isinstance(record, dict):
                    skipped += 1
                    continue

                try:
                    city_id = await source.resolve_city(record, resolver)
                except LocationResolutionError as e:
                    skipped += 1
                    logger.error(
                        f"Error processing record {source.record_label(record)}: {e.message}",
                        extra={"error_context": e.to_dict()}
                    )
                    continue

                if city_id is None:
                    skipped += 1
                    continue

                try:
                    rows.append(source.normalizer.normalize(record, city_id))
                except InvalidRecordError as e:
                    skipped += 1
                    logger.debug(f"Skipping record {source.record_label(record)}: {e.message}")

            logger.info(f"Rows to insert: {len(rows)} skipped: {skipped}")

            # --------------------------------------------------
            # PHASE 4: LOAD IN BATCHES
            # --------------------------------------------------
            inserted = await loader.load_batches(rows, source.source_tag)

            # --------------------------------------------------
            # PHASE 5: FINALIZE
            # --------------------------------------------------
            await self._complete_run(
                run_pk, started_at, ImportStatus.SUCCESS,
                inserted=inserted, skipped=skipped
            )

            result = {
                "status": "success",
                "source": source.source_tag,
                "records_read": len(records),
                "deleted": deleted,
                "inserted": inserted,
                "skipped": skipped,
                "cities_created": resolver.cities_created,
            }
            logger.info(
                f"Import completed for {source.source_tag}: "
                f"Inserted: {inserted}, Skipped: {skipped}"
            )
            return result

        except ETLException as e:
            logger.error(
                f"Import failed for {source.source_tag}: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            await self.db.rollback()
            await self._complete_run(
                run_pk, started_at, ImportStatus.FAILED,
                inserted=e.context.get("inserted_before_failure", inserted),
                skipped=skipped, error_message=e.message
            )
            raise

        except Exception as e:
            logger.exception("Unexpected error in import run")
            await self.db.rollback()
            await self._complete_run(
                run_pk, started_at, ImportStatus.FAILED,
                inserted=inserted, skipped=skipped, error_message=str(e)
            )
            raise ETLException(
                "Unexpected error in import run",
                context={
                    "source": source.source_tag,
                    "records_read": len(records),
                    "skipped": skipped
                },
                original_exception=e
            )

    async def _start_run(self, source: DataSource, records_read: int):
        """Create the ImportRun row; returns (primary key, start time)."""
        started_at = datetime.utcnow()
        run = ImportRun(
            run_id=uuid.uuid4(),
            source=source.source_tag,
            file_path=str(source.file_path),
            status=ImportStatus.RUNNING,
            started_at=started_at,
            records_read=records_read
        )
        self.db.add(run)
        await self.db.commit()
        return run.id, started_at

    async def _complete_run(
        self,
        run_pk: int,
        started_at: datetime,
        status: ImportStatus,
        inserted: int = 0,
        skipped: int = 0,
        error_message: Optional[str] = None
    ):
        """Complete the ImportRun row with statistics"""
        completed_at = datetime.utcnow()
        await self.db.execute(
            update(ImportRun)
            .where(ImportRun.id == run_pk)
            .values(
                status=status,
                completed_at=completed_at,
                duration_seconds=(completed_at - started_at).total_seconds(),
                records_inserted=inserted,
                records_skipped=skipped,
                error_message=error_message
            )
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
