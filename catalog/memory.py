"""In-memory catalog store.

Backs local development (store.backend: memory) and the test suite. Loaded
from the same JSON fixture that scripts/seed_catalog.py writes to PostgreSQL:

    {
      "districts": ["Gasabo", "Kicukiro"],
      "service_types": ["Alternative Care"],
      "beneficiary_types": ["DISABLED"],
      "organizations": [
        {"name": "...", "phone": "...", "services": ["Alternative Care"],
         "beneficiaries": ["DISABLED"],
         "locations": [{"district": "Kicukiro", "sector": "Niboye"}]}
      ]
    }
"""

import json
from pathlib import Path
from typing import Optional

from loguru import logger

from catalog.models import Location, NamedRef, Organization, SearchFilter
from catalog.store import DEFAULT_SEARCH_LIMIT, CatalogStore


def _refs(names: list) -> list[NamedRef]:
    return [NamedRef(id=i, name=n) for i, n in enumerate(names, start=1)]


def _resolve(name: str, refs: list[NamedRef], kind: str) -> NamedRef:
    for ref in refs:
        if ref.name == name:
            return ref
    raise ValueError(f"Unknown {kind} '{name}' in catalog fixture")


def _has_name(refs: list[NamedRef], name: str) -> bool:
    wanted = name.lower()
    return any(ref.name.lower() == wanted for ref in refs)


class InMemoryCatalogStore(CatalogStore):
    def __init__(
        self,
        organizations: Optional[list[Organization]] = None,
        districts: Optional[list[NamedRef]] = None,
        service_types: Optional[list[NamedRef]] = None,
        beneficiary_types: Optional[list[NamedRef]] = None,
    ) -> None:
        self._organizations = list(organizations or [])
        self._districts = list(districts or [])
        self._service_types = list(service_types or [])
        self._beneficiary_types = list(beneficiary_types or [])

    @classmethod
    def from_dict(cls, data: dict) -> "InMemoryCatalogStore":
        districts = _refs(data.get("districts", []))
        service_types = _refs(data.get("service_types", []))
        beneficiary_types = _refs(data.get("beneficiary_types", []))

        organizations = []
        for i, raw in enumerate(data.get("organizations", []), start=1):
            organizations.append(
                Organization(
                    id=raw.get("id", i),
                    name=raw["name"],
                    phone=raw.get("phone"),
                    email=raw.get("email"),
                    website=raw.get("website"),
                    other_services=raw.get("other_services"),
                    paid=bool(raw.get("paid", False)),
                    services=[
                        _resolve(n, service_types, "service type")
                        for n in raw.get("services", [])
                    ],
                    beneficiaries=[
                        _resolve(n, beneficiary_types, "beneficiary type")
                        for n in raw.get("beneficiaries", [])
                    ],
                    locations=[
                        Location(
                            district_name=_resolve(loc["district"], districts, "district").name,
                            sector_name=loc["sector"],
                            cell_name=loc.get("cell"),
                            village_name=loc.get("village"),
                        )
                        for loc in raw.get("locations", [])
                    ],
                )
            )

        return cls(
            organizations=organizations,
            districts=districts,
            service_types=service_types,
            beneficiary_types=beneficiary_types,
        )

    @classmethod
    def from_json(cls, path: str | Path) -> "InMemoryCatalogStore":
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        store = cls.from_dict(data)
        logger.info(
            f"Loaded catalog fixture {path}: {len(store._organizations)} organizations, "
            f"{len(store._districts)} districts."
        )
        return store

    def list_organizations(self) -> list[Organization]:
        return list(self._organizations)

    def list_districts(self) -> list[NamedRef]:
        return list(self._districts)

    def list_service_types(self) -> list[NamedRef]:
        return list(self._service_types)

    def list_beneficiary_types(self) -> list[NamedRef]:
        return list(self._beneficiary_types)

    def search_organizations(
        self,
        search_filter: SearchFilter,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> list[Organization]:
        results = []
        for org in self._organizations:
            if search_filter.district and not any(
                loc.district_name.lower() == search_filter.district.lower() for loc in org.locations
            ):
                continue
            if search_filter.service_type and not _has_name(org.services, search_filter.service_type):
                continue
            if search_filter.beneficiary_type and not _has_name(
                org.beneficiaries, search_filter.beneficiary_type
            ):
                continue
            name = search_filter.name_contains
            if name and name.lower() not in org.name.lower():
                continue
            results.append(org)
            if len(results) >= limit:
                break
        return results

    def count_organizations(self) -> int:
        return len(self._organizations)

    def count_service_types(self) -> int:
        return len(self._service_types)

    def count_districts(self) -> int:
        return len(self._districts)
