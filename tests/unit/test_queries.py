"""
Unit tests for query parameter parsing and the query functions
"""

import uuid
import pytest
from unittest.mock import AsyncMock, MagicMock
from api.queries import (
    list_billboards,
    list_cities,
    parse_limit,
    parse_uuid,
    parse_zipcodes,
    sort_zipcodes,
    validate_enum,
)
from models.base import BoardType, PriceTier
from core.exceptions import QueryValidationError


class TestParsing:

    @pytest.mark.parametrize("value,expected", [
        (None, 50),
        ("", 50),
        ("0", 50),
        ("-3", 50),
        ("abc", 50),
        ("10", 10),
        ("12abc", 12),
        ("2.5", 2),
        (" 7", 7),
        ("+20", 20),
        ("abc12", 50),
        ("2500", 2500),
        ("999999", 2500),
    ])
    def test_parse_limit(self, value, expected):
        assert parse_limit(value) == expected

    def test_parse_uuid_ignores_malformed(self):
        value = uuid.uuid4()
        assert parse_uuid(str(value)) == value
        assert parse_uuid("not-a-uuid") is None
        assert parse_uuid(None) is None

    def test_parse_zipcodes(self):
        assert parse_zipcodes(" 77002, 77002,abc,7700,77003,123456 ") == ["77002", "77003"]
        assert parse_zipcodes(None) == []

    def test_zipcode_numeric_sort(self):
        assert sort_zipcodes(["10001", "2", "00500"]) == ["2", "00500", "10001"]

    def test_zipcode_sort_falls_back_to_strings(self):
        assert sort_zipcodes(["77002", "N/A", "77001"]) == ["77001", "77002", "N/A"]

    def test_zipcode_sort_treats_non_ascii_digits_as_strings(self):
        assert sort_zipcodes(["\u00b2", "77002", "10001"]) == ["10001", "77002", "\u00b2"]

    def test_parse_zipcodes_requires_ascii_digits(self):
        assert parse_zipcodes("\u0667\u0667\u0660\u0660\u0662,77002") == ["77002"]

    def test_validate_enum(self):
        assert validate_enum(BoardType, "board_type", "static") == BoardType.STATIC
        assert validate_enum(PriceTier, "price_tier", "$$$") == PriceTier.PREMIUM
        assert validate_enum(BoardType, "board_type", None) is None

    def test_validate_enum_rejects_unknown_value(self):
        with pytest.raises(QueryValidationError) as exc_info:
            validate_enum(BoardType, "board_type", "neon")

        assert exc_info.value.message == "Invalid board_type; use static or digital"
        assert exc_info.value.context["parameter"] == "board_type"
        assert exc_info.value.context["value"] == "neon"


class TestQueries:

    @pytest.mark.asyncio
    async def test_empty_state_short_circuits(self):
        """A state without cities returns nothing without querying billboards"""
        no_cities = MagicMock()
        no_cities.scalars.return_value.all.return_value = []
        mock_session = AsyncMock()
        mock_session.execute = AsyncMock(return_value=no_cities)

        result = await list_billboards(mock_session, state_id=str(uuid.uuid4()))

        assert result == {"billboards": [], "totalCount": 0}
        assert mock_session.execute.call_count == 1

    @pytest.mark.asyncio
    async def test_invalid_enum_fails_before_querying(self):
        mock_session = AsyncMock()

        with pytest.raises(QueryValidationError):
            await list_billboards(mock_session, traffic_tier="extreme")

        mock_session.execute.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("state_id", [None, "", "texas"])
    async def test_list_cities_requires_state_id(self, state_id):
        with pytest.raises(QueryValidationError):
            await list_cities(AsyncMock(), state_id)
