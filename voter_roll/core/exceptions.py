"""
Errors raised by the neighbor lookup.
Validation errors map to HTTP 400, storage errors to HTTP 500.
"""
from typing import List


class ValidationError(ValueError):
    """Request parameters are missing or malformed; raised before any storage access"""


class UnknownConstituencyError(ValidationError):
    """Constituency identifier is not in the partition registry"""

    def __init__(self, constituency_id: str, valid_values: List[str]):
        self.constituency_id = constituency_id
        self.valid_values = valid_values
        super().__init__(f"Invalid tsc parameter. Valid values are: {', '.join(valid_values)}")


class StorageError(Exception):
    """A read against the voter roll or reference tables failed"""
