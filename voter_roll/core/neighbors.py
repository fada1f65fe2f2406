"""
Neighbor window lookup
Fetches the voters printed around a selected voter on the same part of the roll
and fills in polling station names from the legacy reference table.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple, Type
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select
from voter_roll.core.exceptions import StorageError
from voter_roll.models.legacy_part import LegacyPart
from voter_roll.models.voter import VoterRoll
from voter_roll.schemas.voter import VoterRecord
import logging

logger = logging.getLogger(__name__)

DEFAULT_RADIUS = 5

# Range of the Integer roll columns (int4 on PostgreSQL)
ROLL_NUMBER_MIN = -(2 ** 31)
ROLL_NUMBER_MAX = 2 ** 31 - 1


@dataclass(frozen=True)
class NeighborWindow:
    """Voters ordered by serial number, plus the serial number that was asked for"""

    records: Tuple[VoterRecord, ...]
    selected_sl_no: int


def enrich_polling_station(voter: VoterRecord, legacy_part: Optional[LegacyPart]) -> VoterRecord:
    """
    Return the voter with its polling station name taken from the reference record.
    Without a reference record (or one with no primary-language name) the voter's
    own psName passes through unchanged. Only the station name is copied.
    """
    if legacy_part is None or legacy_part.part_name_v1 is None:
        return voter
    return voter.model_copy(update={"ps_name": legacy_part.part_name_v1})


def first_legacy_part_by_key(legacy_parts: Iterable[LegacyPart]) -> Dict[Tuple[int, int], LegacyPart]:
    """Index reference records by (acNo, partNo); the first record seen for a key wins"""
    by_key: Dict[Tuple[int, int], LegacyPart] = {}
    for legacy_part in legacy_parts:
        by_key.setdefault((legacy_part.ac_no, legacy_part.part_no), legacy_part)
    return by_key


class NeighborResolver:
    """Resolves neighbor windows against one database session"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_neighbors(
        self,
        partition: Type[VoterRoll],
        part_no: int,
        sl_no_in_part: int,
        radius: int = DEFAULT_RADIUS,
    ) -> NeighborWindow:
        """
        Fetch voters of `part_no` whose serial number lies within `radius` of
        `sl_no_in_part` (inclusive), sorted ascending by serial number.

        The window is defined over serial number values, so gaps in the roll give
        fewer rows rather than reaching further out. Any storage failure aborts
        the whole lookup with StorageError.
        """
        if radius < 0:
            raise ValueError("radius must be a non-negative integer")

        if not ROLL_NUMBER_MIN <= part_no <= ROLL_NUMBER_MAX:
            logger.info(f"Part {part_no} is outside the roll number range, no neighbors")
            return NeighborWindow(records=(), selected_sl_no=sl_no_in_part)

        try:
            rows = await self._get_window_from_db(partition, part_no, sl_no_in_part, radius)
            voters = [VoterRecord.model_validate(row) for row in rows]
            legacy_parts = await self._get_legacy_parts(voters)
        except SQLAlchemyError as e:
            logger.exception(
                f"Neighbor lookup failed for {partition.__tablename__} part {part_no} serial {sl_no_in_part}"
            )
            raise StorageError(f"Failed to fetch neighboring voters: {e.__class__.__name__}") from e

        records = tuple(
            enrich_polling_station(voter, legacy_parts.get((voter.ac_no, voter.part_no)))
            for voter in voters
        )
        logger.info(
            f"Found {len(records)} neighbors in {partition.__tablename__} "
            f"for part {part_no} serial {sl_no_in_part}"
        )
        return NeighborWindow(records=records, selected_sl_no=sl_no_in_part)

    async def _get_window_from_db(
        self,
        partition: Type[VoterRoll],
        part_no: int,
        sl_no_in_part: int,
        radius: int,
    ):
        """Get voters of one part within the serial number range"""
        lower = max(sl_no_in_part - radius, ROLL_NUMBER_MIN)
        upper = min(sl_no_in_part + radius, ROLL_NUMBER_MAX)
        if lower > upper:
            return []

        result = await self.db.execute(
            select(partition)
            .where(
                partition.part_no == part_no,
                partition.sl_no_in_part >= lower,
                partition.sl_no_in_part <= upper,
            )
            .order_by(partition.sl_no_in_part, partition.id)
        )
        return result.scalars().all()

    async def _get_legacy_parts(self, voters) -> Dict[Tuple[int, int], LegacyPart]:
        """Get reference records for the (acNo, partNo) pairs present in the window"""
        if not voters:
            return {}

        ac_nos = sorted({voter.ac_no for voter in voters})
        part_nos = sorted({voter.part_no for voter in voters})
        result = await self.db.execute(
            select(LegacyPart)
            .where(LegacyPart.ac_no.in_(ac_nos), LegacyPart.part_no.in_(part_nos))
            .order_by(LegacyPart.id)
        )
        return first_legacy_part_by_key(result.scalars().all())
