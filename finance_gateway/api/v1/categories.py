"""Categories and tags"""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from finance_gateway.api.dependencies import get_category_service, get_tag_service
from finance_gateway.api.v1.schemas import (
    CategoryCreate,
    CategoryUpdate,
    SubcategoryCreate,
    TagCreate,
    TagUpdate,
    changes,
)
from finance_gateway.domain.models import Category, Tag
from finance_gateway.services.transactions import CategoryService, TagService

router = APIRouter()


@router.get("/categories", response_model=List[Category])
async def list_categories(
    type: Optional[Literal["income", "expense"]] = Query(None),
    include_archived: bool = Query(False),
    service: CategoryService = Depends(get_category_service),
):
    return await service.list(type, include_archived)


@router.get("/categories/tree")
async def get_category_tree(
    type: Optional[Literal["income", "expense"]] = Query(None),
    service: CategoryService = Depends(get_category_service),
):
    """Root categories with their subcategories nested under ``subcategories``"""
    return await service.tree(type)


@router.get("/categories/flat")
async def get_flat_categories(
    type: Optional[Literal["income", "expense"]] = Query(None),
    service: CategoryService = Depends(get_category_service),
):
    return [
        {"category": category, "parent_name": parent_name}
        for category, parent_name in await service.flat(type)
    ]


@router.post("/categories", response_model=Category, status_code=201)
async def create_category(body: CategoryCreate, service: CategoryService = Depends(get_category_service)):
    return await service.create(body.model_dump())


@router.post("/categories/{category_id}/subcategories", response_model=Category, status_code=201)
async def create_subcategory(
    category_id: str,
    body: SubcategoryCreate,
    service: CategoryService = Depends(get_category_service),
):
    return await service.create_subcategory(category_id, body.model_dump())


@router.patch("/categories/{category_id}", response_model=Category)
async def update_category(
    category_id: str,
    body: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
):
    return await service.update(category_id, changes(body))


@router.delete("/categories/{category_id}", status_code=204)
async def delete_category(category_id: str, service: CategoryService = Depends(get_category_service)):
    await service.delete(category_id)


@router.get("/tags", response_model=List[Tag])
async def list_tags(service: TagService = Depends(get_tag_service)):
    return await service.list()


@router.post("/tags", response_model=Tag, status_code=201)
async def create_tag(body: TagCreate, service: TagService = Depends(get_tag_service)):
    return await service.create(body.model_dump())


@router.patch("/tags/{tag_id}", response_model=Tag)
async def update_tag(tag_id: str, body: TagUpdate, service: TagService = Depends(get_tag_service)):
    return await service.update(tag_id, changes(body))


@router.delete("/tags/{tag_id}", status_code=204)
async def delete_tag(tag_id: str, service: TagService = Depends(get_tag_service)):
    await service.delete(tag_id)
