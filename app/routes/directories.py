"""Read-only catalog routes backed by the same store as the chat engine.

GET /api/public/directories   all organizations with services, beneficiaries, locations
GET /api/districts            district catalog
GET /api/service-types        service type catalog
GET /api/beneficiary-types    beneficiary type catalog
"""

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from loguru import logger

from catalog.models import NamedRef
from catalog.store import CatalogStore, CatalogStoreError

router = APIRouter(prefix="/api")


def _store(request: Request) -> CatalogStore:
    return request.app.state.catalog_store


def _named(refs: list[NamedRef]) -> list[dict]:
    return [{"id": r.id, "name": r.name} for r in refs]


@router.get("/public/directories", response_class=JSONResponse)
def list_directories(request: Request):
    try:
        organizations = _store(request).list_organizations()
    except CatalogStoreError as e:
        logger.error(f"Error fetching public directories: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch directories")
    return {"directories": [org.to_dict() for org in organizations]}


@router.get("/districts", response_class=JSONResponse)
def list_districts(request: Request):
    try:
        return _named(_store(request).list_districts())
    except CatalogStoreError as e:
        logger.error(f"Error fetching districts: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch districts")


@router.get("/service-types", response_class=JSONResponse)
def list_service_types(request: Request):
    try:
        return _named(_store(request).list_service_types())
    except CatalogStoreError as e:
        logger.error(f"Error fetching service types: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch service types")


@router.get("/beneficiary-types", response_class=JSONResponse)
def list_beneficiary_types(request: Request):
    try:
        return _named(_store(request).list_beneficiary_types())
    except CatalogStoreError as e:
        logger.error(f"Error fetching beneficiary types: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch beneficiary types")
