"""Unit tests for the Groupie autocomplete suggestions."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.models.detail import SuggestionType
from src.models.entities import ProviderTag
from src.models.groupie import GroupieArtist, RelationIndex
from src.providers.artist.groupie_provider import GroupieProvider
from src.services.suggestion_service import MAX_SUGGESTIONS, SuggestionService, match_score
from tests.conftest import FakeClock


@pytest.fixture()
def service(groupie_client: AsyncMock, clock: FakeClock) -> SuggestionService:
    groupie = GroupieProvider(http_client=groupie_client, clock=clock)
    return SuggestionService(groupie, clock=clock)


class TestMatchScore:
    def test_prefix(self) -> None:
        assert match_score("queen", "qu") == 0

    def test_word_prefix(self) -> None:
        assert match_score("los angeles usa", "an") == 1

    def test_substring(self) -> None:
        assert match_score("brian may", "an") == 2

    def test_no_match(self) -> None:
        assert match_score("soja", "xy") is None
        assert match_score("", "xy") is None


class TestSuggestionService:
    @pytest.mark.asyncio
    async def test_groups_rank_before_members(self, service: SuggestionService) -> None:
        found = await service.suggest(ProviderTag.GROUPIE, "be")
        assert [(s.type, s.label) for s in found] == [
            (SuggestionType.GROUP, "Beyoncé"),
            (SuggestionType.MEMBER, "Beyoncé Knowles"),
        ]
        assert all(s.target == "q" for s in found)

    @pytest.mark.asyncio
    async def test_locations_are_humanized(self, service: SuggestionService) -> None:
        found = await service.suggest(ProviderTag.GROUPIE, "lo")
        locations = [s for s in found if s.type is SuggestionType.LOCATION]
        assert [s.label for s in locations] == ["London, UK", "Los Angeles, USA"]
        assert all(s.target == "location" for s in locations)
        assert [s.label for s in found if s.type is not SuggestionType.LOCATION] == ["Roger Taylor"]

    @pytest.mark.asyncio
    async def test_match_quality_orders_before_type(self, service: SuggestionService) -> None:
        found = await service.suggest(ProviderTag.GROUPIE, "an")
        assert [s.label for s in found] == ["Los Angeles, USA", "Brian May", "Paris, France"]

    @pytest.mark.asyncio
    async def test_accents_are_folded(self, service: SuggestionService) -> None:
        found = await service.suggest(ProviderTag.GROUPIE, "BEYONCÉ")
        assert [s.label for s in found] == ["Beyoncé", "Beyoncé Knowles"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "q", "  b  ", "--"])
    async def test_short_queries_are_empty(self, service: SuggestionService, query: str) -> None:
        assert await service.suggest(ProviderTag.GROUPIE, query) == []

    @pytest.mark.asyncio
    async def test_other_sources_have_no_suggestions(
        self, service: SuggestionService, groupie_client: AsyncMock
    ) -> None:
        assert await service.suggest(ProviderTag.SPOTIFY, "queen") == []
        groupie_client.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_index_is_built_once(
        self, service: SuggestionService, groupie_client: AsyncMock
    ) -> None:
        await service.suggest(ProviderTag.GROUPIE, "queen")
        await service.suggest(ProviderTag.GROUPIE, "soja")
        assert groupie_client.get.await_count == 2


class TestSuggestionCap:
    @pytest.mark.asyncio
    async def test_results_capped_and_deduplicated(self) -> None:
        groupie = MagicMock(spec=GroupieProvider)
        artists = [GroupieArtist(id=i, name=f"Band {i:02d}") for i in range(1, 16)]
        artists.append(GroupieArtist(id=99, name="band 01"))
        groupie.list_artists = AsyncMock(return_value=artists)
        groupie.get_relations = AsyncMock(return_value=RelationIndex())

        found = await SuggestionService(groupie).suggest(ProviderTag.GROUPIE, "band")

        assert len(found) == MAX_SUGGESTIONS
        assert [s.label for s in found][:2] == ["Band 01", "Band 02"]
