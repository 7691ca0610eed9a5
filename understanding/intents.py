"""Intent classifier.

Rules are evaluated in a fixed priority order and the first one that fires
decides the intent:

  1. greeting          leading greeting word
  2. help              leading help request
  3. provider_details  an organization was named and the user wants
                       information about it
  4. search            search verbs, service/provider/care mentions, or a
                       "<service> in <district>" phrasing
  5. info              leading information-seeking word
  6. unknown           everything else

A query that is both a greeting and a search is a greeting.
"""

import re
from typing import Optional

from catalog.models import Catalogs
from understanding import lexical
from understanding.extractor import extract, suppress_provider_conflict
from understanding.models import Entities, Intent, Understanding

GREETING_PATTERN = re.compile(
    r"^(?:hi|hello|hey|greetings|good morning|good afternoon|good evening)\b"
)
HELP_PATTERN = re.compile(r"^(?:help|what can you do|how can you help|what do you do)\b")

PROVIDER_CUE_PATTERN = re.compile(r"\babout\b|\btell me\b|\binformation\b|\bdetails\b|\bwhat\b.*\bis\b")

SEARCH_KEYWORDS = (
    "find", "search", "look for", "need", "looking for", "where", "who", "which",
    "show me", "list", "what are", "what is", "tell me", "give me",
)
# Anchored at the word start only, so "needs" and "finding" still count
SEARCH_KEYWORD_PATTERN = re.compile(
    r"\b(?:" + "|".join(re.escape(k) for k in SEARCH_KEYWORDS) + r")"
)
SEARCH_SUBJECT_PATTERN = re.compile(r"service|provider|\bcare\b")

COMPOUND_SEARCH_PATTERNS = [
    re.compile(
        r"(?:what are|what is|show me|list|find|search for).*?(?:provider|service|care|support)"
        r".*?\b(?:in|at|from|of)\b.*?(?:district|area|location)"
    ),
    re.compile(r"(?:provider|service|care|support).*?\b(?:in|at|from|of)\b.*?(?:district|area|location)"),
    re.compile(
        r"(?:alternative care|case management|counseling|legal aid|psychosocial|rehabilitation|education)"
        r".*?\b(?:in|at|from|of)\b.*?district"
    ),
]

INFO_PATTERN = re.compile(r"^(?:what|tell me|explain|describe|information about)\b")


def conversational_intent(query: str) -> Optional[Intent]:
    """Greeting or help, which need no catalog data. None otherwise."""
    lower = lexical.normalize(query)
    if GREETING_PATTERN.search(lower):
        return Intent.GREETING
    if HELP_PATTERN.search(lower):
        return Intent.HELP
    return None


def is_search(lower_query: str) -> bool:
    return bool(
        SEARCH_KEYWORD_PATTERN.search(lower_query)
        or SEARCH_SUBJECT_PATTERN.search(lower_query)
        or any(p.search(lower_query) for p in COMPOUND_SEARCH_PATTERNS)
    )


def _provider_details(entities: Entities) -> Understanding:
    return Understanding(
        intent=Intent.PROVIDER_DETAILS,
        entities=Entities(
            provider_name=entities.provider_name,
            information_request=entities.information_request,
        ),
    )


def understand(query: str, catalogs: Catalogs) -> Understanding:
    """Classify `query` and attach the entities its intent needs."""
    lower = lexical.normalize(query)

    canned = conversational_intent(lower)
    if canned is not None:
        return Understanding(intent=canned)

    entities = extract(query, catalogs)

    if entities.provider_name and (
        entities.information_request.any() or PROVIDER_CUE_PATTERN.search(lower)
    ):
        return _provider_details(entities)

    if is_search(lower):
        search = suppress_provider_conflict(entities)
        return Understanding(
            intent=Intent.SEARCH,
            entities=Entities(
                district=search.district,
                service_type=search.service_type,
                beneficiary_type=search.beneficiary_type,
                provider_name=search.provider_name,
            ),
        )

    if INFO_PATTERN.search(lower):
        if entities.provider_name:
            return _provider_details(entities)
        return Understanding(intent=Intent.INFO)

    return Understanding(intent=Intent.UNKNOWN)
