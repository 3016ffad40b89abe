"""
Province and Location schemas
"""

from typing import Optional
from pydantic import BaseModel

class ProvinceResponse(BaseModel):
    id: int
    name: str
    full_name: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    display_order: Optional[int] = None

class LocationResponse(BaseModel):
    id: int
    name: str
    id_province: int
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    province: Optional[ProvinceResponse] = None
