"""
Tests for the host-facing team building service.
"""

import asyncio

import pytest

from domain.models.activity import VOLLEYBALL
from services import error_codes
from services.rating_service import RatingStore
from services.team_building_service import TeamBuildingService
from tests.conftest import TWO_TEAM_COMPOSITION, make_player


@pytest.fixture
def team_building(two_team_roster, fast_optimizer):
    store = RatingStore(two_team_roster, activity=VOLLEYBALL)
    return TeamBuildingService(store, optimizer=fast_optimizer)


class TestCheckRequest:
    """Validation without searching."""

    def test_valid_request(self, team_building):
        result = team_building.check_request(TWO_TEAM_COMPOSITION, 2)
        assert result.success
        assert result.value["is_valid"] is True

    def test_shortage_is_composition_error(self, team_building):
        result = team_building.check_request(TWO_TEAM_COMPOSITION, 3)
        assert result.error_code == error_codes.COMPOSITION_ERROR
        assert "Not enough Setter players" in result.error

    def test_bad_team_count(self, team_building):
        result = team_building.check_request(TWO_TEAM_COMPOSITION, 0)
        assert result.error_code == error_codes.VALIDATION_ERROR

    def test_unknown_position_in_composition(self, team_building):
        result = team_building.check_request({"GK": 1}, 2)
        assert result.error_code == error_codes.UNKNOWN_POSITION


class TestBuildTeams:
    """Full runs reported as Result values."""

    @pytest.mark.asyncio
    async def test_builds_from_store_roster(self, team_building):
        result = await team_building.build_teams(TWO_TEAM_COMPOSITION, 2)
        assert result.success
        assert len(result.value.teams) == 2
        assert result.value.stats["players_used"] == 10
        assert not team_building.is_running

    @pytest.mark.asyncio
    async def test_explicit_players_override_store(self, team_building):
        players = [make_player(f"oh{i}", ["OH"], {"OH": 1400 + 10 * i}) for i in range(4)]
        result = await team_building.build_teams({"OH": 2}, 2, players)
        assert result.success
        assert sorted(result.value.candidate.player_ids()) == ["oh0", "oh1", "oh2", "oh3"]

    @pytest.mark.asyncio
    async def test_shortage_fails_before_search(self, team_building):
        result = await team_building.build_teams(TWO_TEAM_COMPOSITION, 4)
        assert result.error_code == error_codes.COMPOSITION_ERROR
        assert not team_building.is_running

    @pytest.mark.asyncio
    async def test_second_run_rejected_then_cancel(self, team_building):
        task = asyncio.create_task(team_building.build_teams(TWO_TEAM_COMPOSITION, 2))
        await asyncio.sleep(0)
        assert team_building.is_running

        second = await team_building.build_teams(TWO_TEAM_COMPOSITION, 2)
        assert second.error_code == error_codes.OPTIMIZATION_IN_PROGRESS

        assert team_building.cancel("host closed the dialog").success
        result = await task
        assert result.error_code == error_codes.OPTIMIZATION_CANCELLED
        assert "host closed the dialog" in result.error
        assert not team_building.is_running

    def test_cancel_without_run(self, team_building):
        assert team_building.cancel().error_code == error_codes.STATE_ERROR
