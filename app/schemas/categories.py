from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime


class CategoryBase(BaseModel):
    """Base schema for category data"""
    name: str = Field(..., min_length=1, max_length=200, description="Category name")
    description: Optional[str] = Field(None, max_length=1000, description="Category description")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Category name is required')
        return v.strip()


class CategoryCreate(CategoryBase):
    """Schema for creating a new category"""
    pass


class CategoryUpdate(BaseModel):
    """Schema for updating an existing category; only supplied fields change"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError('Category name cannot be empty or whitespace only')
        return v.strip() if v else v


class CategoryResponse(BaseModel):
    """Schema for category response"""
    id: str = Field(..., description="Category ID")
    name: str
    description: str = ""
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CategoryResult(BaseModel):
    message: str
    result: CategoryResponse


class CategoryListResult(BaseModel):
    message: str
    result: List[CategoryResponse]


class CategoryUpdated(BaseModel):
    message: str
    updated: CategoryResponse
