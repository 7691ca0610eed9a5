"""Response composer: turns dispatch outcomes into chat replies.

Every reply carries at most `max_suggestions` suggestions, deduplicated in
order of first appearance.
"""

from typing import Optional

from catalog.models import Organization
from config import ChatConfig
from responses import templates
from responses.dispatcher import InfoOutcome, ProviderOutcome, SearchOutcome
from responses.reply import OrganizationSummary, Reply
from understanding.models import Entities, InformationRequest

# Results beyond this index are listed without their email address.
EMAILS_SHOWN_IN_SEARCH = 3


def plural(count: int, noun: str) -> str:
    """'1 district', '2 districts'."""
    return f"{count} {noun}{'' if count == 1 else 's'}"


def humanize_code(name: str) -> str:
    """'STREET_CONNECTED' → 'street connected'."""
    return name.replace("_", " ").lower()


def describe_filters(entities: Entities) -> list[str]:
    parts = []
    if entities.service_type:
        parts.append(f"{entities.service_type} services")
    if entities.beneficiary_type:
        parts.append(f"services for {humanize_code(entities.beneficiary_type)}")
    if entities.district:
        parts.append(f"in {entities.district}")
    if entities.provider_name:
        parts.append(f'named "{entities.provider_name}"')
    return parts


class ResponseComposer:
    def __init__(self, cfg: Optional[ChatConfig] = None) -> None:
        self._cfg = cfg or ChatConfig()

    def _fill(self, items: list[str]) -> list[str]:
        return [item.format(district=self._cfg.example_district) for item in items]

    def _suggestions(self, items: list[str]) -> list[str]:
        unique = list(dict.fromkeys(items))
        return unique[: self._cfg.max_suggestions]

    def _reply(self, response: str, suggestions: list[str], **kwargs) -> Reply:
        return Reply(response=response, suggestions=self._suggestions(suggestions), **kwargs)

    # ── Canned ────────────────────────────────────────────────────────────────

    def greeting(self) -> Reply:
        return self._reply(
            templates.GREETING_RESPONSE.format(assistant=self._cfg.assistant_name),
            self._fill(templates.GREETING_SUGGESTIONS),
        )

    def help(self) -> Reply:
        return self._reply(
            templates.HELP_RESPONSE.format(district=self._cfg.example_district),
            self._fill(templates.HELP_SUGGESTIONS),
        )

    def empty_query(self) -> Reply:
        return self._reply(
            templates.EMPTY_QUERY_RESPONSE, self._fill(templates.EMPTY_QUERY_SUGGESTIONS)
        )

    def unknown(self) -> Reply:
        return self._reply(templates.UNKNOWN_RESPONSE, self._fill(templates.UNKNOWN_SUGGESTIONS))

    def error(self) -> Reply:
        return self._reply(templates.ERROR_RESPONSE, self._fill(templates.ERROR_SUGGESTIONS))

    def need_more_specificity(self) -> Reply:
        return self._reply(
            templates.SEARCH_GUIDANCE_RESPONSE.format(district=self._cfg.example_district),
            self._fill(templates.DEFAULT_SUGGESTIONS),
        )

    # ── Search ────────────────────────────────────────────────────────────────

    def search(self, outcome: SearchOutcome) -> Reply:
        entities = outcome.entities
        parts = describe_filters(entities)
        if not outcome.results:
            return self._empty_search(entities, parts)

        results = outcome.results
        header = f"I found {len(results)} service provider{'s' if len(results) > 1 else ''}"
        header += f" with {' and '.join(parts)}:" if parts else ":"
        blocks = [header]
        for index, org in enumerate(results, start=1):
            blocks.append(self._search_entry(index, org, entities.district))

        if outcome.truncated:
            blocks.append(templates.TRUNCATION_NOTE.format(limit=outcome.limit))

        district = self._cfg.example_district
        suggestions = [f"Tell me about {results[0].name}"]
        if entities.district and entities.service_type:
            suggestions.append(f"What other services are available in {entities.district}?")
        if entities.service_type and not entities.district:
            suggestions.append(f"Find {entities.service_type} services in {district}")
        suggestions.extend(templates.SEARCH_FOLLOW_UPS)

        return self._reply(
            "\n\n".join(blocks),
            suggestions,
            results=[OrganizationSummary.from_organization(org) for org in results],
        )

    def _search_entry(self, index: int, org: Organization, district: Optional[str]) -> str:
        lines = [f"{index}. {org.name}"]
        services = org.service_names()
        if services:
            lines.append(f"   Services: {', '.join(services)}")

        districts = org.district_names()
        if district:
            in_district = [d for d in districts if d.lower() == district.lower()]
            districts = in_district or districts
        if districts:
            lines.append(f"   Locations: {', '.join(districts)}")

        if org.phone:
            lines.append(f"   Phone: {org.phone}")
        if org.email and index <= EMAILS_SHOWN_IN_SEARCH:
            lines.append(f"   Email: {org.email}")
        return "\n".join(lines)

    def _empty_search(self, entities: Entities, parts: list[str]) -> Reply:
        if parts:
            response = f"I couldn't find any service providers with {' and '.join(parts)}."
        else:
            response = "I couldn't find any service providers matching your search."

        district = self._cfg.example_district
        suggestions = []
        if entities.district and entities.service_type:
            suggestions.append(f"Show me all {entities.service_type} services")
        if entities.district and not entities.service_type:
            suggestions.append(f"What services are available in {entities.district}?")
        if entities.service_type and not entities.district:
            suggestions.append(f"Find {entities.service_type} services in {district}")
        suggestions.extend(["Show me all services", f"Find services in {district}"])
        return self._reply(response, suggestions)

    # ── Provider details ──────────────────────────────────────────────────────

    def provider_details(
        self,
        outcome: ProviderOutcome,
        request: InformationRequest,
    ) -> Reply:
        if outcome.requested_name is None:
            return self._reply(
                templates.NO_PROVIDER_NAME_RESPONSE, self._fill(templates.DEFAULT_SUGGESTIONS)
            )
        if outcome.provider is None:
            return self._provider_not_found(outcome)

        provider = outcome.provider
        details = self._provider_sections(provider, request)
        header = provider.name
        if not details:
            header = templates.PROVIDER_FALLBACK_HEADER.format(name=provider.name)
            details = self._provider_overview(provider)

        suggestions = []
        if not request.wants_phone and provider.phone:
            suggestions.append(f"What's {provider.name}'s phone number?")
        if not request.wants_email and provider.email:
            suggestions.append(f"What's {provider.name}'s email?")
        if not request.wants_location and provider.locations:
            suggestions.append(f"Where is {provider.name} located?")
        if not suggestions:
            suggestions = list(templates.PROVIDER_SUGGESTIONS)

        return self._reply(
            "\n\n".join([header] + details),
            suggestions,
            provider=OrganizationSummary.from_organization(provider),
        )

    def _provider_sections(self, org: Organization, request: InformationRequest) -> list[str]:
        wants_all = request.wants_all
        details = []

        if (wants_all or request.wants_services) and org.services:
            details.append(f"Services: {', '.join(org.service_names())}")

        if (wants_all or request.wants_location) and org.locations:
            lines = "\n   ".join(loc.describe() for loc in org.locations)
            details.append(f"Locations:\n   {lines}")

        for label, value, asked in (
            ("Phone", org.phone, request.wants_phone),
            ("Email", org.email, request.wants_email),
            ("Website", org.website, request.wants_website),
        ):
            if value and (wants_all or asked):
                details.append(f"{label}: {value}")
            elif asked:
                details.append(f"{label}: {templates.NOT_AVAILABLE}")

        if wants_all:
            if org.beneficiaries:
                names = ", ".join(humanize_code(b) for b in org.beneficiary_names())
                details.append(f"Beneficiaries: {names}")
            if org.other_services:
                details.append(f"Other Services: {org.other_services}")
            details.append(f"Cost: {'Paid' if org.paid else 'Free'}")

        return details

    def _provider_overview(self, org: Organization) -> list[str]:
        details = []
        if org.services:
            details.append(f"Services: {', '.join(org.service_names())}")
        if org.locations:
            details.append(f"Locations: {', '.join(org.district_names())}")
        if org.phone:
            details.append(f"Phone: {org.phone}")
        if org.email:
            details.append(f"Email: {org.email}")
        if org.website:
            details.append(f"Website: {org.website}")
        return details

    def _provider_not_found(self, outcome: ProviderOutcome) -> Reply:
        response = f'I couldn\'t find a provider exactly named "{outcome.requested_name}".'
        if not outcome.similar:
            response += (
                " Could you check the spelling or try searching for providers in a specific area?"
            )
            return self._reply(response, self._fill(templates.DEFAULT_SUGGESTIONS))

        top = outcome.similar[0].name
        names = "\n".join(f"{i}. {org.name}" for i, org in enumerate(outcome.similar, start=1))
        response += (
            f" Did you mean one of these?\n\n{names}\n\n"
            f'Try asking about one of these providers, for example: "Tell me about {top}"'
        )
        return self._reply(
            response,
            [f"Tell me about {top}"] + self._fill(templates.DEFAULT_SUGGESTIONS[:2]),
        )

    # ── Info ──────────────────────────────────────────────────────────────────

    def info(self, outcome: InfoOutcome) -> Reply:
        response = templates.INFO_RESPONSE.format(
            title=self._cfg.directory_title,
            providers=plural(outcome.organization_count, "service provider"),
            service_types=plural(outcome.service_type_count, "different service type"),
            districts=plural(outcome.district_count, "district"),
        )
        return self._reply(response, self._fill(templates.INFO_SUGGESTIONS))
