from dataclasses import dataclass, field
from typing import List

from booking_quotes.domain.errors import DomainError

PROBLEM_TYPE_CONFIGURATION = "https://example.com/problems/service-configuration"
PROBLEM_TYPE_UNKNOWN_FREQUENCY = "https://example.com/problems/unknown-frequency"
PROBLEM_TYPE_NOT_FOUND = "https://example.com/problems/not-found"


@dataclass
class ConfigurationError(DomainError):
    title: str = "Invalid Service Configuration"
    type: str = PROBLEM_TYPE_CONFIGURATION


@dataclass
class ServiceNotFound(DomainError):
    title: str = "Service Not Found"
    type: str = PROBLEM_TYPE_NOT_FOUND


@dataclass
class UnknownFrequency(DomainError):
    detail: str = "Unknown frequency"
    title: str = "Unknown Frequency"
    type: str = PROBLEM_TYPE_UNKNOWN_FREQUENCY
    requested_key: str = ""
    allowed_keys: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.errors is None:
            self.errors = [
                {
                    "field": "frequency_key",
                    "message": f"Unknown frequency '{self.requested_key}'",
                    "allowed": list(self.allowed_keys),
                }
            ]


class InvariantViolation(RuntimeError):
    """Quote arithmetic did not reconcile; always a bug, never bad input."""
