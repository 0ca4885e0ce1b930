"""
Routes: /api/departments and /api/external-entities.
"""

from fastapi import APIRouter, Depends

from cndes.api.dependencies import Container, get_container, get_current_user
from cndes.api.schemas.requests import CatalogEntryIn
from cndes.api.schemas.responses import CatalogEntryResponse, CatalogListResponse

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/departments", response_model=CatalogListResponse)
def list_departments(container: Container = Depends(get_container)):
    return CatalogListResponse(data=container.departments.list_names())


@router.post("/departments", response_model=CatalogEntryResponse)
def add_department(body: CatalogEntryIn, container: Container = Depends(get_container)):
    return CatalogEntryResponse(name=container.add_department.execute(body.name))


@router.get("/external-entities", response_model=CatalogListResponse)
def list_external_entities(container: Container = Depends(get_container)):
    return CatalogListResponse(data=container.external_entities.list_names())


@router.post("/external-entities", response_model=CatalogEntryResponse)
def add_external_entity(body: CatalogEntryIn, container: Container = Depends(get_container)):
    return CatalogEntryResponse(name=container.add_external_entity.execute(body.name))
