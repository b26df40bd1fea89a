"""
Categories endpoints.
"""

from typing import List

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from ..deps import ServicesDep
from .events import EventResponse, EventsListResponse

router = APIRouter()


class CreateCategoryRequest(BaseModel):
    """Create category request."""
    category_id: str = Field(..., min_length=1, description="Category name")


class CategoryResponse(BaseModel):
    """Category response."""
    category_id: str


class CategoriesListResponse(BaseModel):
    """List of categories response."""
    categories: List[CategoryResponse]
    total: int


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(request: CreateCategoryRequest, services: ServicesDep):
    """Create a category."""
    with services.lock:
        category = services.catalog.add_category(request.category_id)
    return CategoryResponse(category_id=category.id)


@router.get("", response_model=CategoriesListResponse)
async def list_categories(services: ServicesDep):
    """List all categories."""
    with services.lock:
        categories = [
            CategoryResponse(category_id=c.id)
            for c in services.catalog.list_categories()
        ]
    return CategoriesListResponse(categories=categories, total=len(categories))


@router.get("/{category_id}/events", response_model=EventsListResponse)
async def list_category_events(category_id: str, services: ServicesDep):
    """List the events tagged with a category."""
    with services.lock:
        events = [
            EventResponse.from_vertex(e)
            for e in services.catalog.events_in_category(category_id)
        ]
    return EventsListResponse(events=events, total=len(events))


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: str, services: ServicesDep):
    """
    Remove a category.

    Events keep existing but are no longer tagged with it.
    """
    with services.lock:
        services.catalog.remove_category(category_id)
