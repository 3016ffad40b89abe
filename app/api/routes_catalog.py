"""
Reference data routes - provinces, locations and tags (public, read-only)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.schemas.common import CollectionResponse
from app.schemas.geo import LocationResponse, ProvinceResponse
from app.schemas.tag import TagResponse
from app.services.catalog_service import CatalogService
from app.services.repositories import Repository, get_repository

tags_router = APIRouter()
provinces_router = APIRouter()
locations_router = APIRouter()

@tags_router.get("/", response_model=CollectionResponse[TagResponse])
async def list_tags(repo: Repository = Depends(get_repository)):
    return CollectionResponse[TagResponse](collection=CatalogService(repo).list_tags())

@provinces_router.get("/", response_model=CollectionResponse[ProvinceResponse])
async def list_provinces(repo: Repository = Depends(get_repository)):
    return CollectionResponse[ProvinceResponse](collection=CatalogService(repo).list_provinces())

@provinces_router.get("/{province_id}", response_model=ProvinceResponse)
async def get_province(province_id: int, repo: Repository = Depends(get_repository)):
    return CatalogService(repo).get_province(province_id)

@locations_router.get("/", response_model=CollectionResponse[LocationResponse])
async def list_locations(
    province: Optional[int] = Query(None),
    repo: Repository = Depends(get_repository)
):
    """All locations, or those of one province"""
    locations = CatalogService(repo).list_locations(province)
    return CollectionResponse[LocationResponse](collection=locations)

@locations_router.get("/province/{province_id}", response_model=CollectionResponse[LocationResponse])
async def list_locations_by_province(province_id: int, repo: Repository = Depends(get_repository)):
    locations = CatalogService(repo).list_locations(province_id)
    return CollectionResponse[LocationResponse](collection=locations)

@locations_router.get("/{location_id}", response_model=LocationResponse)
async def get_location(location_id: int, repo: Repository = Depends(get_repository)):
    return CatalogService(repo).get_location(location_id)
