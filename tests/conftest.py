"""Shared fixtures: a small Rwandan directory held in memory."""

import pytest
from fastapi.testclient import TestClient

from catalog.memory import InMemoryCatalogStore
from catalog.models import Catalogs, Location, NamedRef, Organization
from catalog.store import CatalogStoreError
from config import Config, LoggingConfig

CATALOG = {
    "districts": ["Gasabo", "Kicukiro", "Nyarugenge", "Huye", "Musanze", "Rubavu"],
    "service_types": [
        "Alternative Care",
        "Case Management",
        "Counseling",
        "Legal Aid",
        "Psychosocial Support",
        "Rehabilitation",
        "Education Services",
        "Emergency Response",
        "General Child Protection",
    ],
    "beneficiary_types": [
        "CP_SURVIVOR",
        "STREET_CONNECTED",
        "REFUGEE",
        "DISABLED",
        "UNACCOMPANIED_SEPARATED",
        "IN_CONFLICT_WITH_LAW",
        "GBV_SURVIVOR",
    ],
    "organizations": [
        {
            "name": "Kicukiro Family Center",
            "phone": "+250 788 300 100",
            "email": "info@kicukirofamily.rw",
            "services": ["Alternative Care", "Case Management"],
            "beneficiaries": ["UNACCOMPANIED_SEPARATED"],
            "locations": [{"district": "Kicukiro", "sector": "Niboye", "cell": "Gatare"}],
        },
        {
            "name": "Central Family Support Center",
            "phone": "+250 788 123 456",
            "email": "contact@cfsc.rw",
            "website": "https://cfsc.rw",
            "services": ["Counseling", "Psychosocial Support"],
            "beneficiaries": ["CP_SURVIVOR", "GBV_SURVIVOR"],
            "locations": [
                {"district": "Nyarugenge", "sector": "Nyamirambo"},
                {"district": "Gasabo", "sector": "Remera"},
            ],
        },
        {
            "name": "Hope Rehabilitation Centre",
            "phone": "+250 788 555 010",
            "services": ["Rehabilitation", "Education Services"],
            "beneficiaries": ["DISABLED"],
            "other_services": "Assistive devices and physiotherapy",
            "paid": True,
            "locations": [
                {"district": "Huye", "sector": "Ngoma", "cell": "Butare", "village": "Matyazo"}
            ],
        },
        {
            "name": "Legal Aid Forum",
            "phone": "+250 788 600 700",
            "email": "help@legalaidforum.rw",
            "website": "https://legalaidforum.rw",
            "services": ["Legal Aid"],
            "beneficiaries": ["IN_CONFLICT_WITH_LAW", "CP_SURVIVOR"],
            "locations": [
                {"district": "Gasabo", "sector": "Kimihurura"},
                {"district": "Musanze", "sector": "Muhoza"},
            ],
        },
        {
            "name": "Streets to School",
            "email": "hello@streetstoschool.org",
            "services": ["Education Services", "Case Management"],
            "beneficiaries": ["STREET_CONNECTED"],
            "locations": [{"district": "Rubavu", "sector": "Gisenyi"}],
        },
    ],
}


class FailingStore(InMemoryCatalogStore):
    """A store whose reads all fail, as when the database is down."""

    def _fail(self, *args, **kwargs):
        raise CatalogStoreError("connection refused")

    list_organizations = _fail
    list_districts = _fail
    list_service_types = _fail
    list_beneficiary_types = _fail
    search_organizations = _fail
    count_organizations = _fail
    count_service_types = _fail
    count_districts = _fail


def make_org(org_id: int, name: str, district: str = "Gasabo", **kwargs) -> Organization:
    return Organization(
        id=org_id,
        name=name,
        locations=[Location(district_name=district, sector_name="Remera")],
        services=kwargs.pop("services", [NamedRef(id=1, name="Counseling")]),
        **kwargs,
    )


@pytest.fixture
def store() -> InMemoryCatalogStore:
    return InMemoryCatalogStore.from_dict(CATALOG)


@pytest.fixture
def catalogs(store) -> Catalogs:
    return Catalogs.load(store)


@pytest.fixture
def cfg() -> Config:
    return Config(logging=LoggingConfig(log_queries=False))


@pytest.fixture
def engine(store, cfg):
    from responses.engine import ChatEngine

    return ChatEngine(store, cfg)


def _client(store, cfg, monkeypatch) -> TestClient:
    from app import logging_middleware
    from app.main import create_app

    monkeypatch.setattr(logging_middleware, "get_config", lambda: cfg)
    return TestClient(create_app(store=store, cfg=cfg))


@pytest.fixture
def client(store, cfg, monkeypatch) -> TestClient:
    return _client(store, cfg, monkeypatch)


@pytest.fixture
def failing_client(cfg, monkeypatch) -> TestClient:
    return _client(FailingStore(), cfg, monkeypatch)
