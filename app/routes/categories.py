import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.repositories.categories import CategoryRepository
from app.schemas.categories import (
    CategoryCreate,
    CategoryListResult,
    CategoryResponse,
    CategoryResult,
    CategoryUpdate,
    CategoryUpdated,
)
from app.schemas.common import MessageResponse

router = APIRouter(tags=["categories"])
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def get_category_repository(db: Session = Depends(get_db)) -> CategoryRepository:
    return CategoryRepository(db)


@router.get(
    "",
    response_model=CategoryListResult,
    status_code=status.HTTP_200_OK,
    summary="List categories",
    description="Retrieve categories whose name contains `q` (case-insensitive), newest first"
)
def get_categories(
    q: Optional[str] = None,
    categories: CategoryRepository = Depends(get_category_repository)
):
    logger.info(f"Fetching categories (q={q!r})")
    result = categories.list(q)
    logger.info(f"Successfully retrieved {len(result)} categories")
    return {
        "message": "success",
        "result": [CategoryResponse.model_validate(category) for category in result]
    }


@router.get(
    "/{category_id}",
    response_model=CategoryResult,
    status_code=status.HTTP_200_OK,
    summary="Get category by ID"
)
def get_category(
    category_id: str,
    categories: CategoryRepository = Depends(get_category_repository)
):
    logger.info(f"Fetching category with ID: {category_id}")
    category = categories.get_by_id(category_id)
    return {"message": "success", "result": CategoryResponse.model_validate(category)}


@router.post(
    "",
    response_model=CategoryResult,
    status_code=status.HTTP_200_OK,
    summary="Create new category"
)
def create_category(
    category_data: CategoryCreate,
    categories: CategoryRepository = Depends(get_category_repository)
):
    """
    Create a category. Names must be unique (exact match); a duplicate
    name is rejected with 400.
    """
    logger.info(f"Creating new category: {category_data.name}")
    description = category_data.description.strip() if category_data.description else ""
    category = categories.create(category_data.name, description)
    return {
        "message": "Category created successfully",
        "result": CategoryResponse.model_validate(category)
    }


@router.put(
    "/{category_id}",
    response_model=CategoryUpdated,
    status_code=status.HTTP_200_OK,
    summary="Update category"
)
def update_category(
    category_id: str,
    category_data: CategoryUpdate,
    categories: CategoryRepository = Depends(get_category_repository)
):
    """Merge the supplied fields onto the category; omitted fields are unchanged."""
    logger.info(f"Updating category with ID: {category_id}")
    fields = category_data.model_dump(exclude_unset=True)
    category = categories.update(category_id, fields)
    return {
        "message": "Category updated successfully",
        "updated": CategoryResponse.model_validate(category)
    }


@router.delete(
    "/{category_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete category"
)
def delete_category(
    category_id: str,
    categories: CategoryRepository = Depends(get_category_repository)
):
    logger.info(f"Deleting category with ID: {category_id}")
    categories.delete(category_id)
    return {"message": "Category deleted"}
