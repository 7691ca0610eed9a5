"""Entity extractor: pull organization, district, service type and
beneficiary type out of a free-text chat query.

Rule-based against the catalogs loaded for this query. No NLP model
required. Every rule list below is ordered; the first hit wins.
"""

import re
from dataclasses import replace
from typing import Callable, Optional

from catalog.models import Catalogs, NamedRef, Organization
from understanding import lexical
from understanding.models import Entities, InformationRequest

# ── Organization name patterns ────────────────────────────────────────────────

QUOTED_PATTERNS = [
    re.compile(r'"([^"]+)"'),
    # Apostrophes inside words ("What's", "Bob's") are not quotes
    re.compile(r"(?<!\w)'([^']+)'(?!\w)"),
]

_FIELD = (
    r"(?:(?:phone|e-?mail|contact|location|detail|service|number|website)s?"
    r"|address(?:es)?|information)"
)
_END = r"\s*(?:[?.!,]|$)"

# (name, pattern). Group 1 is the organization name candidate.
QUESTION_PATTERNS: list[tuple[str, re.Pattern]] = [
    (
        "question_field_of_name",
        re.compile(
            r"\b(?:what's|what is|what|tell me|give me|show me|get|find)\b.*?"
            rf"\b{_FIELD}\b.*?\b(?:of|for|from|at|about)\s+([^?.!,\n]+?){_END}",
            re.IGNORECASE,
        ),
    ),
    (
        "field_of_name",
        re.compile(
            rf"\b{_FIELD}\b.*?\b(?:of|for|from|at|about)\s+([^?.!,\n]+?){_END}",
            re.IGNORECASE,
        ),
    ),
    (
        "about_name",
        re.compile(
            r"\b(?:about|for|from|of|at)\s+([^?.!,\n]{4,}?)"
            rf"(?:\s+{_FIELD}\b|{_END})",
            re.IGNORECASE,
        ),
    ),
    (
        "name_field",
        re.compile(
            r"^\s*(?:(?:what's|what is|get|find|show me|give me|tell me)\s+)?"
            rf"([^?.!,\n]{{3,}}?)(?:'s)?\s+{_FIELD}\b",
            re.IGNORECASE,
        ),
    ),
]

LEADING_ARTICLE = re.compile(r"^(?:the|a|an)\s+", re.IGNORECASE)

# ── Variant phrasings ─────────────────────────────────────────────────────────

# Canonical service type name (lowercase) → keyword groups. A group matches
# when every keyword in it occurs in the query.
SERVICE_TYPE_VARIANTS: dict[str, list[tuple[str, ...]]] = {
    "alternative care": [("alternative", "care"), ("foster", "care"), ("adoption",)],
    "case management": [("case", "management")],
    "counseling": [("counseling",), ("counselling",), ("therapy",)],
    "legal aid": [("legal", "aid"), ("legal", "services")],
    "psychosocial support": [("psychosocial", "support"), ("mental", "health")],
    "rehabilitation": [("rehabilitation",), ("rehab",)],
    "education services": [("education",), ("educational", "services")],
    "emergency response": [("emergency", "response")],
    "general child protection": [("child", "protection"), ("general", "protection")],
}

# Beneficiary type code (lowercase) → phrase groups.
BENEFICIARY_TYPE_VARIANTS: dict[str, list[tuple[str, ...]]] = {
    "cp_survivor": [("survivor",), ("abuse",), ("violence",)],
    "street_connected": [("street",), ("homeless",)],
    "refugee": [("refugee",)],
    "disabled": [("disability",), ("disabilities",), ("disabled",), ("special needs",)],
    "unaccompanied_separated": [("unaccompanied",), ("separated",), ("orphan",)],
    "in_conflict_with_law": [("conflict with law",), ("juvenile",), ("delinquent",)],
    "gbv_survivor": [("gbv",), ("gender based",), ("pregnancy",)],
}

# ── Information request keywords ──────────────────────────────────────────────

PHONE_PATTERN = re.compile(
    r"\b(?:phones?|call(?:s|ing)?|telephones?|mobiles?|cell)\b|\bcontacts?\b.*\bnumbers?\b"
)
EMAIL_PATTERN = re.compile(r"\b(?:e-?mails?|mail)\b")
LOCATION_PATTERN = re.compile(
    r"\b(?:locations?|located|address(?:es)?|where|place|area|district|sector)\b"
)
SERVICES_PATTERN = re.compile(r"\bservices?\b|\bwhat\b.*\b(?:offer|offers|provide|provides|do)\b")
WEBSITE_PATTERN = re.compile(r"\b(?:websites?|web\s*site|url|online|internet)\b")
COMPLETENESS_PATTERN = re.compile(r"\b(?:all|everything|full|complete|details|information|about)\b")


def detect_information_request(query: str) -> InformationRequest:
    """Work out which provider fields the query asks for."""
    lower = query.lower()
    specific = {
        "wants_phone": bool(PHONE_PATTERN.search(lower)),
        "wants_email": bool(EMAIL_PATTERN.search(lower)),
        "wants_location": bool(LOCATION_PATTERN.search(lower)),
        "wants_services": bool(SERVICES_PATTERN.search(lower)),
        "wants_website": bool(WEBSITE_PATTERN.search(lower)),
    }
    wants_all = bool(COMPLETENESS_PATTERN.search(lower)) and not any(specific.values())
    return InformationRequest(**specific, wants_all=wants_all)


# ── Organization extraction ───────────────────────────────────────────────────

def _clean_candidate(text: str) -> str:
    return LEADING_ARTICLE.sub("", text.strip()).strip()


def _from_quotes(query: str, organizations: list[Organization]) -> Optional[Organization]:
    for pattern in QUOTED_PATTERNS:
        match = pattern.search(query)
        if match:
            org = lexical.best_match(match.group(1).strip(), organizations)
            if org is not None:
                return org
    return None


def _from_question_patterns(
    query: str, organizations: list[Organization]
) -> Optional[Organization]:
    for _name, pattern in QUESTION_PATTERNS:
        match = pattern.search(query)
        if not match or not match.group(1):
            continue
        candidate = _clean_candidate(match.group(1))
        if len(candidate) < lexical.MIN_CANDIDATE_LENGTH:
            continue
        org = lexical.best_match(candidate, organizations)
        if org is not None:
            return org
    return None


def _from_catalog_sweep(query: str, organizations: list[Organization]) -> Optional[Organization]:
    for org in lexical.longest_first(organizations, key=lambda o: o.name):
        if lexical.name_appears_in(query, org.name):
            return org
    return None


ORGANIZATION_RULES: list[tuple[str, Callable[[str, list[Organization]], Optional[Organization]]]] = [
    ("quoted", _from_quotes),
    ("question_pattern", _from_question_patterns),
    ("catalog_sweep", _from_catalog_sweep),
]


def extract_organization(query: str, organizations: list[Organization]) -> Optional[str]:
    """Return the catalog name of the organization the query refers to, if any."""
    if not organizations:
        return None
    for _rule, find in ORGANIZATION_RULES:
        org = find(query, organizations)
        if org is not None:
            return org.name
    return None


# ── Catalog entity extraction ─────────────────────────────────────────────────

def _group_matches(lower_query: str, groups: list[tuple[str, ...]]) -> bool:
    return any(group and all(word in lower_query for word in group) for group in groups)


def _service_variants(name_lower: str) -> list[tuple[str, ...]]:
    for key, groups in SERVICE_TYPE_VARIANTS.items():
        if key in name_lower or name_lower in key:
            return groups
    return []


def extract_district(lower_query: str, districts: list[NamedRef]) -> Optional[str]:
    for district in districts:
        if district.name.lower() in lower_query:
            return district.name
    return None


def extract_service_type(lower_query: str, service_types: list[NamedRef]) -> Optional[str]:
    # "Alternative Care" must win over a shorter "Care"
    for service in lexical.longest_first(service_types, key=lambda s: s.name):
        name_lower = service.name.lower()
        if name_lower in lower_query:
            return service.name
        if _group_matches(lower_query, _service_variants(name_lower)):
            return service.name
    return None


def extract_beneficiary_type(
    lower_query: str, beneficiary_types: list[NamedRef]
) -> Optional[str]:
    for beneficiary in beneficiary_types:
        name_lower = beneficiary.name.lower()
        if name_lower in lower_query or name_lower.replace("_", " ") in lower_query:
            return beneficiary.name
        if _group_matches(lower_query, BENEFICIARY_TYPE_VARIANTS.get(name_lower, [])):
            return beneficiary.name
    return None


def extract(query: str, catalogs: Catalogs) -> Entities:
    """Extract every entity the query mentions.

    The provider name is returned as found; suppress_provider_conflict()
    applies the search-time precedence rule.
    """
    lower = lexical.normalize(query)
    return Entities(
        district=extract_district(lower, catalogs.districts),
        service_type=extract_service_type(lower, catalogs.service_types),
        beneficiary_type=extract_beneficiary_type(lower, catalogs.beneficiary_types),
        provider_name=extract_organization(query, catalogs.organizations),
        information_request=detect_information_request(query),
    )


def suppress_provider_conflict(entities: Entities) -> Entities:
    """A district or service type beats a loose organization-name guess."""
    if entities.provider_name and (entities.service_type or entities.district):
        return replace(entities, provider_name=None)
    return entities
