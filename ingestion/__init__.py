"""
Import pipeline components for billboard ingestion.

This package contains everything the batch import jobs need:

Modules:
    base: Abstract base class for file-backed billboard sources
    resolver: State/city resolution with a per-run city cache
    runner: Import orchestrator (read, replace, resolve, normalize, load)

Subpackages:
    extractors: Source readers (municipal GeoJSON, Blip digital feed)
    transformers: Per-source normalization into canonical billboard rows
    loaders: Full-replace-by-source batch loader

Architecture:
    Every run replaces all billboards carrying its source tag:

    1. Read - Parse the input file; a missing or malformed file aborts
       before anything is deleted
    2. Replace - Delete the existing rows for the source tag
    3. Resolve + Normalize - Place each record in a city and map it onto
       the canonical row; records that fail are counted as skipped
    4. Load - Insert in batches of 100; a failed batch aborts the run and
       earlier batches stay committed

Usage:
    from ingestion.extractors.blip_extractor import BlipSource
    from ingestion.extractors.geojson_extractor import GeoJSONSource
    from ingestion.runner import ImportRunner

Example:
    async with get_session_maker()() as session:
        runner = ImportRunner(session)
        result = await runner.run(BlipSource("feeds/blip.json"))

    print(f"Inserted {result['inserted']} billboards")
"""

__all__ = [
    "DataSource",
    "ImportRunner",
    "LocationResolver",
    "CityCache",
    "GeoJSONSource",
    "BlipSource",
    "GeoJSONNormalizer",
    "BlipNormalizer",
    "BillboardLoader",
]
