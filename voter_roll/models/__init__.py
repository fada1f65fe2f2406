from voter_roll.models.api_key import ApiKey, ApiKeyStatus
from voter_roll.models.voter import Voter, VoterRoll, VoterRollMixin, voter_roll_model
from voter_roll.models.legacy_part import LegacyPart, LegacyPart2025

__all__ = [
    "ApiKey",
    "ApiKeyStatus",
    "Voter",
    "VoterRoll",
    "VoterRollMixin",
    "voter_roll_model",
    "LegacyPart",
    "LegacyPart2025",
]
