"""Reply objects returned to the chat route."""

from dataclasses import dataclass, field
from typing import Optional

from catalog.models import Organization


@dataclass
class OrganizationSummary:
    id: int
    name: str
    services: list[str]
    locations: list[str]        # district names
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None

    @classmethod
    def from_organization(cls, org: Organization) -> "OrganizationSummary":
        return cls(
            id=org.id,
            name=org.name,
            services=org.service_names(),
            locations=org.district_names(),
            phone=org.phone,
            email=org.email,
            website=org.website,
        )

    def to_dict(self, include_website: bool = True) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "services": self.services,
            "locations": self.locations,
            "phone": self.phone,
            "email": self.email,
        }
        if include_website:
            data["website"] = self.website
        return data


@dataclass
class Reply:
    response: str
    suggestions: list[str] = field(default_factory=list)
    results: Optional[list[OrganizationSummary]] = None
    provider: Optional[OrganizationSummary] = None

    def to_dict(self) -> dict:
        data: dict = {"response": self.response, "suggestions": list(self.suggestions)}
        if self.results is not None:
            data["results"] = [r.to_dict(include_website=False) for r in self.results]
        if self.provider is not None:
            data["provider"] = self.provider.to_dict()
        return data
