"""
Abstract base class for file-backed billboard sources
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Dict, Any, Optional, Union
from uuid import UUID
from ingestion.resolver import LocationResolver
from ingestion.transformers.normalizer import BillboardNormalizer
from core.exceptions import ConfigurationError
import json
import logging

logger = logging.getLogger(__name__)


class DataSource(ABC):
    """
    Abstract base class for all billboard sources.

    Responsibilities:
    - Read and shape-check the input file
    - Decide which city each record belongs to
    - Provide the normalizer for its format
    """

    def __init__(
        self,
        source_tag: str,
        file_path: Union[str, Path],
        normalizer: BillboardNormalizer
    ):
        self.source_tag = source_tag
        self.file_path = Path(file_path)
        self.normalizer = normalizer

    @abstractmethod
    def extract_records(self, payload: Any) -> List[Dict[str, Any]]:
        """
        Pull the record list out of the parsed file.

        Raises:
            ConfigurationError: the file root has the wrong shape
        """

    @abstractmethod
    async def resolve_city(
        self,
        record: Dict[str, Any],
        resolver: LocationResolver
    ) -> Optional[UUID]:
        """City id for a record, or None when it cannot be placed"""

    async def prepare(self, resolver: LocationResolver):
        """Checks that must pass before anything is deleted"""
        return None

    def record_label(self, record: Dict[str, Any]) -> str:
        return self.normalizer.record_label(record)

    async def fetch_data(self) -> List[Dict[str, Any]]:
        """
        Read the input file.

        Raises:
            ConfigurationError: missing, unreadable or malformed file
        """
        if not self.file_path.exists():
            raise ConfigurationError(
                f"File not found: {self.file_path}",
                context={"file_path": str(self.file_path), "source": self.source_tag}
            )

        logger.info(f"Reading {self.source_tag} records from {self.file_path}")

        try:
            with self.file_path.open("r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(
                f"Could not parse {self.file_path}",
                context={"file_path": str(self.file_path), "source": self.source_tag},
                original_exception=e
            )

        records = self.extract_records(payload)
        logger.info(f"Records in file: {len(records)}")
        return records
