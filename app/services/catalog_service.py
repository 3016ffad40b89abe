"""
Read-only reference data: provinces, locations and tags
"""

from typing import List, Optional

from app.core.errors import NotFoundError
from app.schemas.geo import LocationResponse, ProvinceResponse
from app.schemas.tag import TagResponse
from app.services.presenters import present_location, present_province
from app.services.repositories import Repository

class CatalogService:

    def __init__(self, repo: Repository):
        self.repo = repo

    def list_provinces(self) -> List[ProvinceResponse]:
        return [present_province(p) for p in self.repo.list_provinces()]

    def get_province(self, province_id: int) -> ProvinceResponse:
        province = self.repo.get_province(province_id)
        if not province:
            raise NotFoundError("Province")
        return present_province(province)

    def list_locations(self, province_id: Optional[int] = None) -> List[LocationResponse]:
        if province_id is not None and not self.repo.get_province(province_id):
            raise NotFoundError("Province")
        return [present_location(self.repo, loc) for loc in self.repo.list_locations(province_id)]

    def get_location(self, location_id: int) -> LocationResponse:
        location = self.repo.get_location(location_id)
        if not location:
            raise NotFoundError("Location")
        return present_location(self.repo, location)

    def list_tags(self) -> List[TagResponse]:
        return [TagResponse(id=t["id"], name=t["name"]) for t in self.repo.list_tags()]
