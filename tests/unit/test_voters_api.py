"""Tests for GET /api/v1/voters/neighbors."""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from voter_roll.api.v1.voters import parse_neighbor_params
from voter_roll.core.exceptions import StorageError, ValidationError
from voter_roll.core.partitions import PARTITIONS, valid_constituencies
from voter_roll.models.voter import Voter

NEIGHBORS_URL = "/api/v1/voters/neighbors"


class TestParseNeighborParams:
    def test_valid_parameters(self) -> None:
        partition, part_no, sl_no = parse_neighbor_params("AC210", "5", "20")
        assert partition is PARTITIONS["AC210"]
        assert (part_no, sl_no) == (5, 20)

    def test_missing_constituency_uses_default(self) -> None:
        partition, _, _ = parse_neighbor_params(None, "5", "20")
        assert partition is Voter

    @pytest.mark.parametrize("part_no, sl_no", [(None, "20"), ("5", None), ("", "20"), ("5", "  ")])
    def test_missing_numbers_are_rejected(self, part_no, sl_no) -> None:
        with pytest.raises(ValidationError, match="partNo and slNoInPart are required"):
            parse_neighbor_params("AC210", part_no, sl_no)

    def test_non_integer_numbers_are_rejected(self) -> None:
        with pytest.raises(ValidationError, match="must be integers"):
            parse_neighbor_params("AC210", "five", "20")


class TestNeighborsEndpoint:
    """Tests for the neighbors endpoint against SQLite."""

    async def test_returns_sorted_window_with_selected_serial(self, client: AsyncClient, seed_voters, ac210) -> None:
        await seed_voters(ac210, [23, 18, 21, 20, 19, 30])

        resp = await client.get(NEIGHBORS_URL, params={"tsc": "AC210", "partNo": "5", "slNoInPart": "20"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["selectedSlNo"] == 20
        assert [voter["slNoInPart"] for voter in body["data"]] == [18, 19, 20, 21, 23]

    @pytest.mark.parametrize(
        "part_no, sl_no",
        [("5", "99999999999999999999"), ("5", "9223372036854775808"), ("99999999999999999999", "20")],
    )
    async def test_numbers_beyond_column_range_return_empty_window(
        self, client: AsyncClient, seed_voters, ac210, part_no, sl_no
    ) -> None:
        await seed_voters(ac210, [1, 2, 3])

        resp = await client.get(NEIGHBORS_URL, params={"tsc": "AC210", "partNo": part_no, "slNoInPart": sl_no})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"] == []
        assert body["selectedSlNo"] == int(sl_no)

    async def test_records_use_roll_field_names(self, client: AsyncClient, seed_voters, seed_legacy_part, ac210) -> None:
        await seed_voters(ac210, [20], ps_name="Old School")
        await seed_legacy_part(part_name_v1="New School")

        resp = await client.get(NEIGHBORS_URL, params={"tsc": "AC210", "partNo": "5", "slNoInPart": "20"})

        voter = resp.json()["data"][0]
        assert voter["_id"] == "voters_ac210-210-5-20"
        assert voter["acNo"] == 210
        assert voter["partNo"] == 5
        assert voter["fmNameV2"] == "Elector 20"
        assert voter["rlnFmNmV2"] == "Relative 20"
        assert voter["rlnType"] == "F"
        assert voter["psName"] == "New School"
        assert "locality" not in " ".join(voter.keys()).lower()

    async def test_window_stays_within_radius(self, client: AsyncClient, seed_voters, ac210) -> None:
        await seed_voters(ac210, range(1, 60))

        resp = await client.get(NEIGHBORS_URL, params={"tsc": "AC210", "partNo": "5", "slNoInPart": "30"})

        serials = [voter["slNoInPart"] for voter in resp.json()["data"]]
        assert serials == list(range(25, 36))

    async def test_default_partition_when_tsc_omitted(self, client: AsyncClient, seed_voters, ac210) -> None:
        await seed_voters(Voter, [20], ac_no=1)
        await seed_voters(ac210, [19, 20, 21])

        resp = await client.get(NEIGHBORS_URL, params={"partNo": "5", "slNoInPart": "20"})

        assert resp.status_code == 200
        assert [voter["acNo"] for voter in resp.json()["data"]] == [1]

    async def test_empty_tsc_uses_default_partition(self, client: AsyncClient, seed_voters) -> None:
        await seed_voters(Voter, [20], ac_no=1)

        resp = await client.get(NEIGHBORS_URL, params={"tsc": "", "partNo": "5", "slNoInPart": "20"})

        assert resp.status_code == 200
        assert len(resp.json()["data"]) == 1

    async def test_default_identifier_is_valid(self, client: AsyncClient) -> None:
        resp = await client.get(NEIGHBORS_URL, params={"tsc": "Voter", "partNo": "5", "slNoInPart": "20"})

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "data": [], "selectedSlNo": 20}

    async def test_same_request_twice_gives_same_output(self, client: AsyncClient, seed_voters, ac210) -> None:
        await seed_voters(ac210, [18, 19, 20, 21, 23])
        params = {"tsc": "AC210", "partNo": "5", "slNoInPart": "20"}

        first = await client.get(NEIGHBORS_URL, params=params)
        second = await client.get(NEIGHBORS_URL, params=params)

        assert first.json() == second.json()


class TestNeighborsEndpointValidation:
    """Validation failures never reach the resolver."""

    @pytest.mark.parametrize(
        "params",
        [
            {"tsc": "AC210", "slNoInPart": "20"},
            {"tsc": "AC210", "partNo": "5"},
            {"tsc": "AC210"},
            {"tsc": "AC210", "partNo": "", "slNoInPart": "20"},
        ],
    )
    async def test_missing_numbers_return_400_without_storage_calls(self, client: AsyncClient, params) -> None:
        with patch("voter_roll.api.v1.voters.NeighborResolver") as mock_resolver:
            resp = await client.get(NEIGHBORS_URL, params=params)

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "partNo and slNoInPart are required"}
        mock_resolver.assert_not_called()

    async def test_unknown_tsc_returns_400_listing_valid_values(self, client: AsyncClient) -> None:
        with patch("voter_roll.api.v1.voters.NeighborResolver") as mock_resolver:
            resp = await client.get(NEIGHBORS_URL, params={"tsc": "AC999", "partNo": "5", "slNoInPart": "20"})

        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == f"Invalid tsc parameter. Valid values are: {', '.join(valid_constituencies())}"
        assert "Voter" in body["error"]
        mock_resolver.assert_not_called()

    async def test_non_integer_numbers_return_400(self, client: AsyncClient) -> None:
        with patch("voter_roll.api.v1.voters.NeighborResolver") as mock_resolver:
            resp = await client.get(NEIGHBORS_URL, params={"tsc": "AC210", "partNo": "5a", "slNoInPart": "20"})

        assert resp.status_code == 400
        assert resp.json()["success"] is False
        mock_resolver.assert_not_called()


class TestNeighborsEndpointFailures:
    """Unexpected failures are wrapped in the error envelope."""

    async def test_storage_error_returns_500_envelope(self, client: AsyncClient) -> None:
        mock_resolver = MagicMock()
        mock_resolver.return_value.find_neighbors = AsyncMock(
            side_effect=StorageError("Failed to fetch neighboring voters: OperationalError")
        )

        with patch("voter_roll.api.v1.voters.NeighborResolver", mock_resolver):
            resp = await client.get(NEIGHBORS_URL, params={"tsc": "AC210", "partNo": "5", "slNoInPart": "20"})

        assert resp.status_code == 500
        assert resp.json() == {
            "success": False,
            "error": "Failed to fetch neighboring voters: OperationalError",
        }

    async def test_database_failure_is_not_propagated(self, client: AsyncClient, async_session) -> None:
        with patch.object(
            async_session,
            "execute",
            AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("connection reset"))),
        ):
            resp = await client.get(NEIGHBORS_URL, params={"tsc": "AC210", "partNo": "5", "slNoInPart": "20"})

        assert resp.status_code == 500
        body = resp.json()
        assert body["success"] is False
        assert body["error"]

    async def test_unexpected_error_returns_500_envelope(self, client: AsyncClient) -> None:
        mock_resolver = MagicMock()
        mock_resolver.return_value.find_neighbors = AsyncMock(side_effect=RuntimeError("boom"))

        with patch("voter_roll.api.v1.voters.NeighborResolver", mock_resolver):
            resp = await client.get(NEIGHBORS_URL, params={"tsc": "AC210", "partNo": "5", "slNoInPart": "20"})

        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": "boom"}

    async def test_unexpected_error_is_logged_with_traceback(self, client: AsyncClient, caplog) -> None:
        mock_resolver = MagicMock()
        mock_resolver.return_value.find_neighbors = AsyncMock(side_effect=RuntimeError("boom"))

        with caplog.at_level(logging.ERROR, logger="voter_roll.api.v1.voters"):
            with patch("voter_roll.api.v1.voters.NeighborResolver", mock_resolver):
                await client.get(NEIGHBORS_URL, params={"tsc": "AC210", "partNo": "5", "slNoInPart": "20"})

        records = [record for record in caplog.records if record.name == "voter_roll.api.v1.voters"]
        assert records
        assert records[0].exc_info is not None
        assert isinstance(records[0].exc_info[1], RuntimeError)
