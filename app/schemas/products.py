import math
from collections.abc import Mapping
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.core.exceptions import ValidationError
from app.core.object_id import is_object_id
from app.services.images import is_absolute_url

REQUIRED_PRODUCT_FIELDS = ("name", "description", "price", "category")
NAME_MAX_LENGTH = 200


class ProductFields(BaseModel):
    """Validated product payload, ready to be written"""
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    category: str = Field(..., pattern=r"^[0-9a-fA-F]{24}$")
    image_url: Optional[str] = Field(
        None,
        description="Stored image reference; None means not supplied",
    )


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def coerce_price(value) -> float:
    """Convert a JSON number or form string to a finite, non-negative float"""
    if isinstance(value, bool):
        raise ValidationError("Price must be a number", details=["\"price\" must be a number"])
    try:
        price = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        raise ValidationError("Price must be a number", details=["\"price\" must be a number"])
    if not math.isfinite(price):
        raise ValidationError("Price must be a number", details=["\"price\" must be a finite number"])
    if price < 0:
        raise ValidationError(
            "Price must be greater than or equal to 0",
            details=["\"price\" must be greater than or equal to 0"],
        )
    return price


def parse_product_fields(data) -> ProductFields:
    """
    Validate a product create/update payload coming from JSON or form data.

    Checks run in a fixed order and the first failing stage raises:
    required fields, category identifier format, then price coercion.

    Args:
        data: Mapping of raw field values (form values arrive as strings)

    Returns:
        ProductFields with ``image_url`` left as None when not supplied

    Raises:
        ValidationError: describing the first failing check
    """
    if not isinstance(data, Mapping):
        raise ValidationError("Request body must be a JSON object")

    missing = [field for field in REQUIRED_PRODUCT_FIELDS if _is_blank(data.get(field))]
    if missing:
        raise ValidationError(
            "Name, description, price and category are required",
            details=[f"\"{field}\" is required" for field in missing],
        )

    for field in ("name", "description"):
        if not isinstance(data[field], str):
            raise ValidationError("Validation error", details=[f"\"{field}\" must be a string"])

    category = data["category"]
    if not is_object_id(category):
        raise ValidationError("Invalid category ID", details=["Invalid category ObjectId"])

    price = coerce_price(data["price"])

    name = data["name"].strip()
    if len(name) > NAME_MAX_LENGTH:
        raise ValidationError(
            "Validation error",
            details=[f"\"name\" length must be less than or equal to {NAME_MAX_LENGTH} characters long"],
        )

    image_url = data.get("imageURL")
    if image_url is not None and not isinstance(image_url, str):
        raise ValidationError("Validation error", details=["\"imageURL\" must be a string"])
    image_url = image_url.strip() if image_url else None
    if image_url and not is_absolute_url(image_url):
        raise ValidationError("Validation error", details=["\"imageURL\" must be a valid absolute uri"])

    return ProductFields(
        name=name,
        description=data["description"].strip(),
        price=price,
        category=category.lower(),
        image_url=image_url,
    )


class CategoryRef(BaseModel):
    """Category reference populated with the category name at read time"""
    id: str
    name: str


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str
    price: float
    category: CategoryRef
    imageURL: str = Field("", description="Absolute image URL, empty when the product has no image")
    created_at: datetime
    updated_at: datetime


class ProductResult(BaseModel):
    message: str
    result: ProductResponse


class ProductListResult(BaseModel):
    message: str
    result: List[ProductResponse]
