# Pydantic schemas
from voter_roll.schemas.voter import VoterRecord, NeighborWindowResponse, ErrorResponse
from voter_roll.schemas.polling_station import PollingStation, PollingStationListResponse

__all__ = [
    "VoterRecord", "NeighborWindowResponse", "ErrorResponse",
    "PollingStation", "PollingStationListResponse",
]
