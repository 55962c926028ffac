# backend/farmdesk/core/exceptions.py

"""
Error taxonomy shared by stores, page controllers and the HTTP layer.

 - NotFoundError: requested Id absent from the store
 - ValidationError: bad input, raised before any store mutation
 - NetworkError: transport or remote API failure (retry is the caller's call)
 - PartialBatchFailure: remote batch where some records failed
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class FarmDeskError(Exception):
    """Base class for every failure the core reports."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(FarmDeskError):
    def __init__(self, entity: str, record_id: Any):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.record_id = record_id


class ValidationError(FarmDeskError):
    def __init__(self, errors: Dict[str, str], message: str = "Validation failed"):
        super().__init__(message)
        self.errors = dict(errors)


class NetworkError(FarmDeskError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class RecordFailure:
    record_id: Optional[int]
    message: str
    field_errors: Dict[str, str] = field(default_factory=dict)


class PartialBatchFailure(FarmDeskError):
    def __init__(self, entity: str, succeeded: List[Any], failed: List[RecordFailure]):
        super().__init__(
            f"{len(failed)} of {len(succeeded) + len(failed)} {entity} records failed"
        )
        self.entity = entity
        self.succeeded = list(succeeded)
        self.failed = list(failed)
