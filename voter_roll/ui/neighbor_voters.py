"""
Neighboring voters modal
Fetches the neighbor window for a selected voter from the voters API and renders it
as an HTML table with the selected voter highlighted.
"""
import asyncio
import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlencode, urlparse

import aiohttp
from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import ValidationError as SchemaValidationError

from voter_roll.core.security import sign_request
from voter_roll.schemas.voter import VoterRecord

logger = logging.getLogger(__name__)

NEIGHBORS_PATH = "/api/v1/voters/neighbors"

RELATION_TYPE_NAMES = {
    "H": "Husband",
    "F": "Father",
    "M": "Mother",
    "W": "Wife",
    "S": "Son",
    "D": "Daughter",
    "B": "Brother",
    "SI": "Sister",
    "O": "Others",
}

GENDER_NAMES = {
    "M": "Male",
    "F": "Female",
    "O": "Other",
}

_templates = Environment(
    loader=FileSystemLoader(Path(__file__).parent / "templates"),
    autoescape=select_autoescape(["html"]),
)


def relation_type_name(rln_type: Optional[str]) -> str:
    """Full relation name for a relation code; unknown codes are returned as given"""
    if not rln_type:
        return ""
    return RELATION_TYPE_NAMES.get(rln_type.upper(), rln_type)


def gender_name(sex: Optional[str]) -> str:
    """Full gender name for a sex code; unknown codes are returned as given"""
    if not sex:
        return "-"
    return GENDER_NAMES.get(sex.upper(), sex)


class NeighborFetchError(Exception):
    """The neighbors request failed or returned an unsuccessful envelope"""


class ModalState(str, enum.Enum):
    CLOSED = "closed"
    LOADING = "loading"
    ERROR = "error"
    RESULTS = "results"


@dataclass(frozen=True)
class NeighborRow:
    """One table row as displayed"""

    voter_id: str
    part_no: int
    sl_no_in_part: int
    elector_name: str
    relation: str
    age: str
    gender: str
    is_selected: bool


def build_rows(voters: List[VoterRecord], selected_sl_no: int) -> List[NeighborRow]:
    """Display rows in the order received; the row matching selected_sl_no is flagged"""
    rows = []
    for voter in voters:
        if voter.rln_fm_nm_v2:
            relation = f"{voter.rln_fm_nm_v2} ({relation_type_name(voter.rln_type)})"
        else:
            relation = "-"
        rows.append(
            NeighborRow(
                voter_id=voter.id,
                part_no=voter.part_no,
                sl_no_in_part=voter.sl_no_in_part,
                elector_name=voter.fm_name_v2 or "-",
                relation=relation,
                age=str(voter.age) if voter.age else "-",
                gender=gender_name(voter.sex),
                is_selected=voter.sl_no_in_part == selected_sl_no,
            )
        )
    return rows


class NeighborsClient:
    """Signed HTTP client for the neighbors endpoint"""

    def __init__(self, base_url: str, api_key: str, timeout_seconds: float = 10):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def fetch_neighbors(self, constituency: str, part_no: int, sl_no_in_part: int) -> List[VoterRecord]:
        """Fetch the neighbor window; raises NeighborFetchError on any failure"""
        query = urlencode({
            "tsc": constituency,
            "partNo": str(part_no),
            "slNoInPart": str(sl_no_in_part),
        })
        url = f"{self.base_url}{NEIGHBORS_PATH}?{query}"
        parsed = urlparse(url)
        timestamp, signature = sign_request(self.api_key, "GET", f"{parsed.path}?{parsed.query}")
        headers = {
            "X-API-Key": self.api_key,
            "X-Timestamp": timestamp,
            "X-Signature": signature,
        }

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(url, headers=headers) as response:
                    if response.status != 200:
                        raise NeighborFetchError("Failed to fetch neighboring voters")
                    result = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error calling neighbors endpoint: {str(e)}")
            raise NeighborFetchError(str(e) or "An error occurred") from e
        except ValueError as e:
            logger.error(f"Malformed neighbors response: {str(e)}")
            raise NeighborFetchError("Unexpected neighbors response") from e

        if not isinstance(result, dict):
            raise NeighborFetchError("Unexpected neighbors response")
        if not result.get("success"):
            raise NeighborFetchError(result.get("error") or "Failed to fetch neighbors")

        try:
            return [VoterRecord.model_validate(item) for item in result.get("data", [])]
        except (SchemaValidationError, TypeError) as e:
            raise NeighborFetchError("Unexpected neighbors response") from e


class NeighborVotersModal:
    """
    Neighboring voters view for one selected voter

    Each open() issues one request. Opening again (or closing) while a request is
    in flight makes that request's result stale: it is dropped when it arrives.
    """

    def __init__(self, client: NeighborsClient):
        self.client = client
        self.state = ModalState.CLOSED
        self.selected_voter: Optional[VoterRecord] = None
        self.constituency: Optional[str] = None
        self.neighbors: List[VoterRecord] = []
        self.error: Optional[str] = None
        self._generation = 0

    @property
    def is_open(self) -> bool:
        return self.state != ModalState.CLOSED

    async def open(self, selected_voter: VoterRecord, constituency: str) -> None:
        self._generation += 1
        generation = self._generation

        self.selected_voter = selected_voter
        self.constituency = constituency
        self.neighbors = []
        self.error = None
        self.state = ModalState.LOADING

        try:
            neighbors = await self.client.fetch_neighbors(
                constituency, selected_voter.part_no, selected_voter.sl_no_in_part
            )
        except NeighborFetchError as e:
            if generation != self._generation:
                return
            self.error = str(e)
            self.state = ModalState.ERROR
            return

        if generation != self._generation:
            logger.debug(f"Discarding stale neighbors response for serial {selected_voter.sl_no_in_part}")
            return

        self.neighbors = neighbors
        self.state = ModalState.RESULTS

    def close(self) -> None:
        self._generation += 1
        self.state = ModalState.CLOSED
        self.selected_voter = None
        self.constituency = None
        self.neighbors = []
        self.error = None

    @property
    def rows(self) -> List[NeighborRow]:
        if self.selected_voter is None:
            return []
        return build_rows(self.neighbors, self.selected_voter.sl_no_in_part)

    def render(self) -> str:
        """HTML for the modal in its current state; empty when closed"""
        if not self.is_open:
            return ""
        template = _templates.get_template("neighbor_voters_modal.html")
        return template.render(
            state=self.state.value,
            selected_voter=self.selected_voter,
            error=self.error,
            rows=self.rows,
        )
