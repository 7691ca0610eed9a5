"""Canned chat responses and default suggestion lists.

Placeholders: {assistant}, {district}, {title}.
"""

# ── Conversational ────────────────────────────────────────────────────────────

GREETING_RESPONSE = (
    "Hello! I'm the {assistant}. I can help you find child protection services "
    "by location, type, or specific needs. What would you like to know?"
)

GREETING_SUGGESTIONS = [
    "Find services in my district",
    "Show me all service types",
    "What services are available?",
]

HELP_RESPONSE = """\
I can help you:

• Find services by district, service type, or beneficiary type
• Search for providers with specific services in a district (e.g., 'alternative care providers in Kicukiro')
• Find services for specific beneficiary types in a district
• Get detailed information about any provider (phone, email, location, services)
• Answer questions about the directory

**Examples:**
• 'Find alternative care providers in Kicukiro'
• 'What are the counseling services in {district}?'
• 'Show me services for children with disabilities in Gasabo'
• 'Find services in {district}'
• 'What's the phone number of [Provider Name]?'
• 'Tell me about [Provider Name]'"""

HELP_SUGGESTIONS = [
    "Find alternative care providers in Kicukiro",
    "Show me counseling services in {district}",
    "What services are available?",
]

# ── Fallbacks ─────────────────────────────────────────────────────────────────

EMPTY_QUERY_RESPONSE = "I didn't understand that. Could you please rephrase your question?"

EMPTY_QUERY_SUGGESTIONS = [
    "Find services in {district}",
    "Show me counseling services",
    "What services are available?",
]

UNKNOWN_RESPONSE = """\
I'm not sure I understand. I can help you find child protection services. Try asking:

• 'Find services in [district name]'
• 'Show me [service type] services'
• 'What services are available?'"""

UNKNOWN_SUGGESTIONS = EMPTY_QUERY_SUGGESTIONS

SEARCH_GUIDANCE_RESPONSE = """\
I can help you find service providers. Try asking:

• 'Find alternative care providers in Kicukiro'
• 'Show me counseling services in {district}'
• 'What services are available in Gasabo?'
• 'Find services for children with disabilities'

You can search by service type, district, or beneficiary type."""

DEFAULT_SUGGESTIONS = [
    "Find services in {district}",
    "Show me all service types",
    "What services are available?",
]

ERROR_RESPONSE = (
    "I'm sorry, I encountered an error processing your request. "
    "Please try again or rephrase your question."
)

ERROR_SUGGESTIONS = [
    "Find services in {district}",
    "Show me all services",
    "What services are available?",
]

# ── Provider details ──────────────────────────────────────────────────────────

NO_PROVIDER_NAME_RESPONSE = (
    "I couldn't identify which provider you're asking about. "
    "Could you please mention the provider's name?"
)

PROVIDER_FALLBACK_HEADER = (
    "I found {name}, but I'm not sure what information you need. Here's what I have:"
)

PROVIDER_SUGGESTIONS = [
    "Find other services",
    "Show me all service types",
    "What services are available?",
]

NOT_AVAILABLE = "Not available"

# ── Search ────────────────────────────────────────────────────────────────────

TRUNCATION_NOTE = (
    "(Showing first {limit} results. Try being more specific with your search "
    "for better results.)"
)

SEARCH_FOLLOW_UPS = [
    "Find services in another district",
    "Show me all service types",
]

# ── Info ──────────────────────────────────────────────────────────────────────

INFO_RESPONSE = """\
The {title} contains:

• {providers}
• {service_types}
• Services available in {districts}

You can search for services by district, service type, or specific needs. What would you like to find?"""

INFO_SUGGESTIONS = GREETING_SUGGESTIONS
