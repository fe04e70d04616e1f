"""
GeoJSON billboard permit extractor
"""

from pathlib import Path
from typing import List, Dict, Any, Optional, Union
from uuid import UUID
from ingestion.base import DataSource
from ingestion.resolver import LocationResolver
from ingestion.transformers.normalizer import GeoJSONNormalizer
from models.base import SourceTag
from core.exceptions import ConfigurationError
import logging

logger = logging.getLogger(__name__)


class GeoJSONSource(DataSource):
    """
    Billboard point features from a municipal GeoJSON FeatureCollection.

    The file covers a single city, so every feature is assigned to the
    city id given at construction time.
    """

    def __init__(
        self,
        file_path: Union[str, Path],
        city_id: UUID,
        source_tag: str = SourceTag.HOUSTON_GEOJSON.value
    ):
        super().__init__(
            source_tag=source_tag,
            file_path=file_path,
            normalizer=GeoJSONNormalizer(source_tag)
        )
        self.city_id = city_id

    def extract_records(self, payload: Any) -> List[Dict[str, Any]]:
        if not isinstance(payload, dict):
            raise ConfigurationError(
                "GeoJSON root must be an object",
                context={"file_path": str(self.file_path)}
            )

        features = payload.get("features") or []
        if not isinstance(features, list):
            raise ConfigurationError(
                "GeoJSON features must be a list",
                context={"file_path": str(self.file_path)}
            )
        return features

    async def prepare(self, resolver: LocationResolver):
        if not await resolver.city_exists(self.city_id):
            raise ConfigurationError(
                f"Target city not found: {self.city_id}",
                context={"city_id": str(self.city_id), "source": self.source_tag}
            )

    async def resolve_city(
        self,
        record: Dict[str, Any],
        resolver: LocationResolver
    ) -> Optional[UUID]:
        return self.city_id
