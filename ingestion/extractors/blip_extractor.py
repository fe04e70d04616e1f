"""
Blip digital billboard feed extractor
"""

from pathlib import Path
from typing import List, Dict, Any, Optional, Union
from uuid import UUID
from ingestion.base import DataSource
from ingestion.resolver import LocationResolver
from ingestion.transformers.normalizer import BlipNormalizer, clean_string
from models.base import SourceTag
from core.exceptions import ConfigurationError


class BlipSource(DataSource):
    """
    Digital screens scraped from the Blip marketplace.

    The file is a JSON array spanning many cities; each record names its
    state in "province" and its city in "city".
    """

    def __init__(
        self,
        file_path: Union[str, Path],
        source_tag: str = SourceTag.BLIP_DIGITAL.value
    ):
        super().__init__(
            source_tag=source_tag,
            file_path=file_path,
            normalizer=BlipNormalizer(source_tag)
        )

    def extract_records(self, payload: Any) -> List[Dict[str, Any]]:
        if not isinstance(payload, list):
            raise ConfigurationError(
                "JSON root must be an array",
                context={"file_path": str(self.file_path)}
            )
        return payload

    async def prepare(self, resolver: LocationResolver):
        await resolver.load_states()

    async def resolve_city(
        self,
        record: Dict[str, Any],
        resolver: LocationResolver
    ) -> Optional[UUID]:
        state_name = clean_string(record.get("province"))
        city_name = clean_string(record.get("city"))
        if not state_name or not city_name:
            return None
        return await resolver.resolve(state_name, city_name)
