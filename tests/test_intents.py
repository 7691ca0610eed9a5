"""Tests for intent classification priority and attached entities."""

import pytest

from understanding.intents import conversational_intent, understand
from understanding.models import Entities, Intent


class TestConversational:
    @pytest.mark.parametrize("query", ["hello", "Hi there", "good morning!", "Hey"])
    def test_greeting(self, catalogs, query):
        assert understand(query, catalogs).intent == Intent.GREETING

    def test_greeting_beats_search(self, catalogs):
        understanding = understand("Hello, find counseling services in Gasabo", catalogs)
        assert understanding.intent == Intent.GREETING
        assert understanding.entities == Entities()

    @pytest.mark.parametrize("query", ["help", "What can you do?", "how can you help me"])
    def test_help(self, catalogs, query):
        assert understand(query, catalogs).intent == Intent.HELP

    def test_greeting_word_must_stand_alone(self):
        assert conversational_intent("history of this directory") is None
        assert conversational_intent("helpful services") is None


class TestProviderDetails:
    def test_phone_request(self, catalogs):
        understanding = understand(
            "What's the phone number of Central Family Support Center", catalogs
        )
        assert understanding.intent == Intent.PROVIDER_DETAILS
        assert understanding.entities.provider_name == "Central Family Support Center"
        assert understanding.entities.information_request.wants_phone

    def test_tell_me_about(self, catalogs):
        understanding = understand("Tell me about Legal Aid Forum", catalogs)
        assert understanding.intent == Intent.PROVIDER_DETAILS
        assert understanding.entities.information_request.wants_all

    def test_beats_search_entities(self, catalogs):
        understanding = understand("What services does Legal Aid Forum offer in Gasabo?", catalogs)
        assert understanding.intent == Intent.PROVIDER_DETAILS
        assert understanding.entities.provider_name == "Legal Aid Forum"
        assert understanding.entities.district is None

    def test_plural_field_request(self, catalogs):
        understanding = understand("What are the emails of Legal Aid Forum?", catalogs)
        assert understanding.intent == Intent.PROVIDER_DETAILS
        assert understanding.entities.provider_name == "Legal Aid Forum"
        assert understanding.entities.information_request.wants_email

    def test_info_stage_fallback(self, catalogs):
        understanding = understand("Describe Hope Rehabilitation Centre", catalogs)
        assert understanding.intent == Intent.PROVIDER_DETAILS
        assert understanding.entities.provider_name == "Hope Rehabilitation Centre"


class TestSearch:
    def test_service_in_district(self, catalogs):
        understanding = understand("Find alternative care providers in Kicukiro", catalogs)
        assert understanding.intent == Intent.SEARCH
        assert understanding.entities.service_type == "Alternative Care"
        assert understanding.entities.district == "Kicukiro"
        assert understanding.entities.provider_name is None

    def test_unknown_district(self, catalogs):
        understanding = understand("Find services in Atlantis", catalogs)
        assert understanding.intent == Intent.SEARCH
        assert not understanding.entities.has_search_filters()

    def test_provider_name_kept_without_district_or_service(self, catalogs):
        understanding = understand("Find Streets to School", catalogs)
        assert understanding.intent == Intent.SEARCH
        assert understanding.entities.provider_name == "Streets to School"
        assert understanding.entities.beneficiary_type == "STREET_CONNECTED"

    def test_provider_name_suppressed_by_district(self, catalogs):
        understanding = understand("Find Kicukiro Family Center in Kicukiro", catalogs)
        assert understanding.intent == Intent.SEARCH
        assert understanding.entities.district == "Kicukiro"
        assert understanding.entities.provider_name is None

    def test_inflected_search_verbs(self, catalogs):
        understanding = understand("Finding help for refugees in Huye", catalogs)
        assert understanding.intent == Intent.SEARCH
        assert understanding.entities.beneficiary_type == "REFUGEE"
        assert understanding.entities.district == "Huye"

        understanding = understand("My child needs counselling in Gasabo", catalogs)
        assert understanding.intent == Intent.SEARCH
        assert understanding.entities.service_type == "Counseling"
        assert understanding.entities.district == "Gasabo"

    def test_service_mention_is_search(self, catalogs):
        assert understand("history of services", catalogs).intent == Intent.SEARCH

    def test_beneficiary_in_district(self, catalogs):
        understanding = understand(
            "Show me services for children with disabilities in Gasabo", catalogs
        )
        assert understanding.intent == Intent.SEARCH
        assert understanding.entities.beneficiary_type == "DISABLED"
        assert understanding.entities.district == "Gasabo"


class TestInfoAndUnknown:
    @pytest.mark.parametrize("query", ["What does the directory contain?", "Describe the directory"])
    def test_info(self, catalogs, query):
        understanding = understand(query, catalogs)
        assert understanding.intent == Intent.INFO
        assert understanding.entities == Entities()

    def test_unknown(self, catalogs):
        understanding = understand("Banana pancakes", catalogs)
        assert understanding.intent == Intent.UNKNOWN
        assert understanding.entities == Entities()

    def test_deterministic(self, catalogs):
        query = "Show me counseling services in Gasabo"
        assert understand(query, catalogs) == understand(query, catalogs)
