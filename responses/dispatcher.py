"""Query dispatcher: turn an Understanding into data-store reads.

  search           AND of every extracted entity, capped at the result limit
  provider_details first case-insensitive name containment match, else
                   up to three "did you mean" candidates by word overlap
  info             aggregate counts
  everything else  no data access
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from loguru import logger

from catalog.models import Organization, SearchFilter
from catalog.store import DEFAULT_SEARCH_LIMIT, CatalogStore
from understanding import lexical
from understanding.models import Entities, Intent, Understanding

MAX_SIMILAR_PROVIDERS = 3


class NeedMoreSpecificity:
    """Returned for a search with no entities instead of an unfiltered fetch."""

    def __repr__(self) -> str:
        return "NEED_MORE_SPECIFICITY"


NEED_MORE_SPECIFICITY = NeedMoreSpecificity()


@dataclass
class SearchOutcome:
    entities: Entities
    results: list[Organization]
    limit: int

    @property
    def truncated(self) -> bool:
        return len(self.results) >= self.limit


@dataclass
class ProviderOutcome:
    requested_name: Optional[str]
    provider: Optional[Organization] = None
    similar: list[Organization] = field(default_factory=list)


@dataclass
class InfoOutcome:
    organization_count: int
    service_type_count: int
    district_count: int


Outcome = Union[SearchOutcome, NeedMoreSpecificity, ProviderOutcome, InfoOutcome, None]


def build_search_filter(entities: Entities) -> SearchFilter:
    return SearchFilter(
        district=entities.district,
        service_type=entities.service_type,
        beneficiary_type=entities.beneficiary_type,
        name_contains=entities.provider_name,
    )


def dispatch_search(
    entities: Entities,
    store: CatalogStore,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> Union[SearchOutcome, NeedMoreSpecificity]:
    search_filter = build_search_filter(entities)
    if search_filter.is_empty():
        logger.info("Search without entities; asking for more detail.")
        return NEED_MORE_SPECIFICITY

    results = store.search_organizations(search_filter, limit=limit)[:limit]
    logger.info(f"Search {search_filter} returned {len(results)} organizations.")
    return SearchOutcome(entities=entities, results=results, limit=limit)


def similar_organizations(
    name: str,
    organizations: list[Organization],
    limit: int = MAX_SIMILAR_PROVIDERS,
) -> list[Organization]:
    """Organizations sharing significant words with `name`, best first."""
    scored = [(lexical.overlap_score(name, org.name), org) for org in organizations]
    scored = [item for item in scored if item[0] > 0]
    # stable sort: equal scores keep catalog order
    scored.sort(key=lambda item: item[0], reverse=True)
    return [org for _, org in scored[:limit]]


def dispatch_provider_details(
    entities: Entities,
    store: CatalogStore,
    organizations: list[Organization],
) -> ProviderOutcome:
    name = entities.provider_name
    if not name:
        return ProviderOutcome(requested_name=None)

    provider = store.find_organization(name)
    if provider is not None:
        return ProviderOutcome(requested_name=name, provider=provider)

    similar = similar_organizations(name, organizations)
    logger.info(f"No provider named '{name}'; {len(similar)} similar candidates.")
    return ProviderOutcome(requested_name=name, similar=similar)


def dispatch_info(store: CatalogStore) -> InfoOutcome:
    return InfoOutcome(
        organization_count=store.count_organizations(),
        service_type_count=store.count_service_types(),
        district_count=store.count_districts(),
    )


def dispatch(
    understanding: Understanding,
    store: CatalogStore,
    organizations: list[Organization],
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> Outcome:
    """Run the reads `understanding` calls for. None for canned intents."""
    if understanding.intent == Intent.SEARCH:
        return dispatch_search(understanding.entities, store, limit=limit)
    if understanding.intent == Intent.PROVIDER_DETAILS:
        return dispatch_provider_details(understanding.entities, store, organizations)
    if understanding.intent == Intent.INFO:
        return dispatch_info(store)
    return None
