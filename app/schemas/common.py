"""
Common Pydantic schemas
"""

from typing import Any, Generic, List, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")

class ErrorResponse(BaseModel):
    """Error response schema"""
    success: bool = False
    message: str
    error_code: Optional[str] = None
    details: Optional[Any] = None

class MessageResponse(BaseModel):
    """Plain acknowledgement"""
    success: bool = True
    message: str

class CreatedResponse(MessageResponse):
    """Acknowledgement carrying the new entity id"""
    id: int

class Pagination(BaseModel):
    """Pagination metadata"""
    page: int
    limit: int
    total: int
    pages: int

class CollectionResponse(BaseModel, Generic[T]):
    """List of entities, paginated when the endpoint supports it"""
    collection: List[T]
    pagination: Optional[Pagination] = None

class PageParams(BaseModel):
    """Resolved page/limit pair"""
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def describe(self, total: int) -> Pagination:
        return Pagination(
            page=self.page,
            limit=self.limit,
            total=total,
            pages=(total + self.limit - 1) // self.limit,
        )
