"""
Load canonical billboard rows with full-replace-by-source semantics
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import delete, insert
from models.billboard import Billboard
from schemas.normalized import BillboardCreate
from core.config import settings
from core.exceptions import BatchInsertError, DatabaseError
import logging

logger = logging.getLogger(__name__)


class BillboardLoader:
    """
    Write billboards for one source tag.

    Semantics:
    - delete_source() removes every row of a tag and commits on its own
    - load_batches() inserts fixed-size batches, committing each one
    - a failing batch stops the load; earlier batches stay committed
    """

    def __init__(self, db_session: AsyncSession, batch_size: Optional[int] = None):
        self.db = db_session
        self.batch_size = batch_size or settings.IMPORT_BATCH_SIZE

    async def delete_source(self, source: str) -> int:
        """
        Delete all billboards carrying a source tag.

        Returns:
            Number of rows deleted
        """
        try:
            result = await self.db.execute(
                delete(Billboard).where(Billboard.source == source)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DatabaseError(
                f"Failed to delete existing {source} billboards",
                context={
                    "operation": "DELETE",
                    "table_name": "billboards",
                    "source": source
                },
                original_exception=e
            )

        deleted = result.rowcount or 0
        logger.info(f"Deleted {deleted} existing {source} billboards")
        return deleted

    async def insert_batch(self, rows: List[BillboardCreate]) -> int:
        """Insert and commit one batch. Returns the number of rows inserted."""
        if not rows:
            return 0

        await self.db.execute(insert(Billboard), [row.model_dump() for row in rows])
        await self.db.commit()
        return len(rows)

    async def load_batches(self, rows: List[BillboardCreate], source: str) -> int:
        """
        Insert rows in batches of batch_size, sequentially.

        Returns:
            Total number of rows inserted

        Raises:
            BatchInsertError: on the first batch that fails
        """
        total_inserted = 0

        for i in range(0, len(rows), self.batch_size):
            batch = rows[i:i + self.batch_size]
            batch_number = i // self.batch_size + 1

            try:
                count = await self.insert_batch(batch)
            except Exception as e:
                await self.db.rollback()
                logger.error(f"Insert error at batch {batch_number}: {e}")
                raise BatchInsertError(
                    f"Insert failed at batch {batch_number}",
                    context={
                        "source": source,
                        "batch_number": batch_number,
                        "batch_size": len(batch),
                        "inserted_before_failure": total_inserted
                    },
                    original_exception=e
                )

            total_inserted += count
            logger.info(f"Inserted {total_inserted} / {len(rows)}")

        return total_inserted
