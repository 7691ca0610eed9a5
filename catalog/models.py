"""Read-only views of the directory records the chat engine works with.

The data store owns the schema; these dataclasses are the shape every
CatalogStore implementation hands back.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from catalog.store import CatalogStore


@dataclass(frozen=True)
class NamedRef:
    """A catalog entry: district, service type or beneficiary type."""

    id: int
    name: str


@dataclass
class Location:
    district_name: str
    sector_name: str
    cell_name: Optional[str] = None
    village_name: Optional[str] = None

    def describe(self) -> str:
        """Render as 'District - Sector[ - Cell][ - Village]'."""
        parts = [self.district_name, self.sector_name]
        if self.cell_name:
            parts.append(self.cell_name)
        if self.village_name:
            parts.append(self.village_name)
        return " - ".join(parts)


@dataclass
class Organization:
    id: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    other_services: Optional[str] = None
    paid: bool = False
    services: list[NamedRef] = field(default_factory=list)
    beneficiaries: list[NamedRef] = field(default_factory=list)
    locations: list[Location] = field(default_factory=list)

    def service_names(self) -> list[str]:
        return _unique(s.name for s in self.services)

    def beneficiary_names(self) -> list[str]:
        return _unique(b.name for b in self.beneficiaries)

    def district_names(self) -> list[str]:
        return _unique(loc.district_name for loc in self.locations)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "website": self.website,
            "otherServices": self.other_services,
            "paid": self.paid,
            "services": [{"id": s.id, "name": s.name} for s in self.services],
            "beneficiaries": [{"id": b.id, "name": b.name} for b in self.beneficiaries],
            "locations": [
                {
                    "districtName": loc.district_name,
                    "sectorName": loc.sector_name,
                    "cellName": loc.cell_name,
                    "villageName": loc.village_name,
                }
                for loc in self.locations
            ],
        }


@dataclass(frozen=True)
class SearchFilter:
    """AND-combined search conditions. Unset fields do not constrain."""

    district: Optional[str] = None
    service_type: Optional[str] = None
    beneficiary_type: Optional[str] = None
    name_contains: Optional[str] = None

    def is_empty(self) -> bool:
        return not (
            self.district or self.service_type or self.beneficiary_type or self.name_contains
        )


@dataclass
class Catalogs:
    """Snapshot of every catalog, loaded fresh for a single query."""

    organizations: list[Organization] = field(default_factory=list)
    districts: list[NamedRef] = field(default_factory=list)
    service_types: list[NamedRef] = field(default_factory=list)
    beneficiary_types: list[NamedRef] = field(default_factory=list)

    @classmethod
    def load(cls, store: "CatalogStore") -> "Catalogs":
        return cls(
            organizations=store.list_organizations(),
            districts=store.list_districts(),
            service_types=store.list_service_types(),
            beneficiary_types=store.list_beneficiary_types(),
        )


def _unique(values) -> list[str]:
    """Deduplicate while keeping first-seen order."""
    seen: dict[str, None] = {}
    for value in values:
        seen.setdefault(value, None)
    return list(seen)
