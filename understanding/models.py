"""Structured output of query understanding.

Every field is always present: booleans default to False and strings to
None, so downstream code never has to guess whether a key exists.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Optional


class Intent(str, Enum):
    GREETING = "greeting"
    HELP = "help"
    SEARCH = "search"
    INFO = "info"
    PROVIDER_DETAILS = "provider_details"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class InformationRequest:
    """Which provider fields the user asked for."""

    wants_phone: bool = False
    wants_email: bool = False
    wants_location: bool = False
    wants_services: bool = False
    wants_website: bool = False
    wants_all: bool = False

    def any_specific(self) -> bool:
        return (
            self.wants_phone
            or self.wants_email
            or self.wants_location
            or self.wants_services
            or self.wants_website
        )

    def any(self) -> bool:
        return self.any_specific() or self.wants_all


@dataclass(frozen=True)
class Entities:
    district: Optional[str] = None
    service_type: Optional[str] = None
    beneficiary_type: Optional[str] = None
    provider_name: Optional[str] = None
    information_request: InformationRequest = field(default_factory=InformationRequest)

    def has_search_filters(self) -> bool:
        return bool(
            self.district or self.service_type or self.beneficiary_type or self.provider_name
        )


@dataclass(frozen=True)
class Understanding:
    intent: Intent
    entities: Entities = field(default_factory=Entities)

    def to_dict(self) -> dict:
        """Plain dict for logging."""
        return {"intent": self.intent.value, "entities": asdict(self.entities)}
