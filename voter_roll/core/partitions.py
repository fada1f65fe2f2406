"""
Constituency registry: maps a constituency identifier to the table holding its polling roll.
Adding a partition is one entry in PARTITIONS.
"""
from typing import Dict, List, Optional, Type
from voter_roll.core.exceptions import UnknownConstituencyError
from voter_roll.models.voter import Voter, VoterRoll, voter_roll_model

DEFAULT_CONSTITUENCY = "Voter"

PARTITIONS: Dict[str, Type[VoterRoll]] = {
    "AC210": voter_roll_model("AC210", "voters_ac210"),
    "AC211": voter_roll_model("AC211", "voters_ac211"),
    "AC212": voter_roll_model("AC212", "voters_ac212"),
    "AC224": voter_roll_model("AC224", "voters_ac224"),
    "AC225": voter_roll_model("AC225", "voters_ac225"),
    "AC226": voter_roll_model("AC226", "voters_ac226"),
    "AC227": voter_roll_model("AC227", "voters_ac227"),
    DEFAULT_CONSTITUENCY: Voter,
}


def valid_constituencies() -> List[str]:
    """All recognized identifiers, default included, in registry order"""
    return list(PARTITIONS.keys())


def resolve_partition(constituency_id: Optional[str]) -> Type[VoterRoll]:
    """
    Return the partition model for a constituency identifier.
    None or blank selects the default partition; anything else unknown is rejected
    rather than silently routed to the default table.
    """
    if not constituency_id:
        return PARTITIONS[DEFAULT_CONSTITUENCY]

    model = PARTITIONS.get(constituency_id)
    if model is None:
        raise UnknownConstituencyError(constituency_id, valid_constituencies())
    return model
