import json
import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from app.core import config
from app.core.exceptions import ValidationError
from app.database import get_db
from app.repositories.products import ProductRepository
from app.schemas.common import MessageResponse
from app.schemas.products import ProductListResult, ProductResult, parse_product_fields
from app.services.asset_store import AssetStore, get_asset_store
from app.services.images import validate_image_upload


router = APIRouter(tags=["products"])
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")

PRODUCT_BODY_DOC = {
    "requestBody": {
        "required": True,
        "content": {
            "application/json": {
                "schema": {
                    "type": "object",
                    "required": ["name", "description", "price", "category"],
                    "properties": {
                        "name": {"type": "string"},
                        "description": {"type": "string"},
                        "price": {"type": "number", "minimum": 0},
                        "category": {"type": "string", "pattern": "^[0-9a-fA-F]{24}$"},
                        "imageURL": {"type": "string"},
                    },
                }
            },
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "required": ["name", "description", "price", "category"],
                    "properties": {
                        "name": {"type": "string"},
                        "description": {"type": "string"},
                        "price": {"type": "string"},
                        "category": {"type": "string"},
                        "imageURL": {"type": "string"},
                        "image": {"type": "string", "format": "binary"},
                    },
                }
            },
        },
    }
}


@dataclass
class ImagePart:
    filename: str
    content_type: Optional[str]
    content: bytes


def get_product_repository(db: Session = Depends(get_db)) -> ProductRepository:
    return ProductRepository(db)


async def read_product_payload(request: Request) -> Tuple[dict, Optional[ImagePart]]:
    """
    Read product fields from a JSON or form body.

    Form bodies may carry a single ``image`` file part; at most one byte
    more than MAX_UPLOAD_BYTES of it is read, and nothing is written until
    the fields have been validated.
    """
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        try:
            fields = {key: value for key, value in form.items() if not isinstance(value, UploadFile)}
            image = None
            upload = form.get("image")
            # Browsers send an empty, unnamed part when no file was picked
            if isinstance(upload, UploadFile) and upload.filename:
                image = ImagePart(
                    filename=upload.filename,
                    content_type=upload.content_type,
                    # One byte past the limit is enough to reject it later
                    content=await upload.read(config.MAX_UPLOAD_BYTES + 1),
                )
        finally:
            await form.close()
        return fields, image

    body = await request.body()
    if not body:
        return {}, None
    try:
        return json.loads(body), None
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise ValidationError("Request body must be valid JSON")


def attach_image(image: Optional[ImagePart], assets: AssetStore) -> Optional[str]:
    """Validate and store the uploaded image; returns the stored path or None"""
    if image is None:
        return None
    validate_image_upload(image.content, image.content_type)
    return assets.store(image.content, image.filename)


def parse_price_bound(value: Optional[str], name: str) -> Optional[float]:
    if value is None or not value.strip():
        return None
    try:
        bound = float(value)
    except ValueError:
        raise ValidationError("Validation error", details=[f"\"{name}\" must be a number"])
    if math.isnan(bound):
        raise ValidationError("Validation error", details=[f"\"{name}\" must be a number"])
    return bound


@router.get("", response_model=ProductListResult, summary="Search products")
def get_products(
    q: Optional[str] = None,
    category: Optional[str] = None,
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    products: ProductRepository = Depends(get_product_repository)
):
    """
    Search products. All filters are optional and combined with AND:
    - q: case-insensitive substring of the name
    - category: exact category ID (ignored when not a valid ID)
    - minPrice / maxPrice: inclusive price bounds
    """
    lower = parse_price_bound(min_price, "minPrice")
    upper = parse_price_bound(max_price, "maxPrice")

    logger.info(f"Searching products (q={q!r}, category={category!r}, minPrice={lower}, maxPrice={upper})")
    rows = products.search(q=q, category=category, min_price=lower, max_price=upper)
    logger.info(f"Found {len(rows)} product(s)")

    return {
        "message": "success",
        "result": [products.to_response(product, category_name) for product, category_name in rows]
    }


@router.get("/{product_id}", response_model=ProductResult, summary="Get product by ID")
def get_product(
    product_id: str,
    products: ProductRepository = Depends(get_product_repository)
):
    logger.info(f"Fetching product with ID: {product_id}")
    product = products.get_by_id(product_id)
    return {"message": "success", "result": products.to_response(product)}


@router.post(
    "",
    response_model=ProductResult,
    status_code=status.HTTP_200_OK,
    summary="Create product",
    openapi_extra=PRODUCT_BODY_DOC
)
async def create_product(
    request: Request,
    products: ProductRepository = Depends(get_product_repository),
    assets: AssetStore = Depends(get_asset_store)
):
    """
    Create a product from a JSON body or a multipart form.

    A multipart ``image`` part is stored under the uploads mount and its
    path overrides any ``imageURL`` value.
    """
    payload, image = await read_product_payload(request)
    fields = parse_product_fields(payload)

    stored_path = attach_image(image, assets)
    if stored_path:
        fields = fields.model_copy(update={"image_url": stored_path})

    logger.info(f"Creating product: {fields.name}")
    try:
        product = products.create(fields)
    except Exception:
        if stored_path:
            assets.discard(stored_path)
        raise

    return {"message": "Product created", "result": products.to_response(product)}


@router.put(
    "/{product_id}",
    response_model=ProductResult,
    status_code=status.HTTP_200_OK,
    summary="Update product",
    openapi_extra=PRODUCT_BODY_DOC
)
async def update_product(
    product_id: str,
    request: Request,
    products: ProductRepository = Depends(get_product_repository),
    assets: AssetStore = Depends(get_asset_store)
):
    """
    Replace a product's fields. name, description, price and category must
    all be supplied again. Without a new image or ``imageURL`` the stored
    image is kept; a replaced image file stays on disk.
    """
    logger.info(f"Updating product with ID: {product_id}")
    products.get_by_id(product_id)

    payload, image = await read_product_payload(request)
    fields = parse_product_fields(payload)

    stored_path = attach_image(image, assets)
    if stored_path:
        fields = fields.model_copy(update={"image_url": stored_path})

    try:
        product = products.update(product_id, fields)
    except Exception:
        if stored_path:
            assets.discard(stored_path)
        raise

    return {"message": "Product updated", "result": products.to_response(product)}


@router.delete("/{product_id}", response_model=MessageResponse, summary="Delete product")
def delete_product(
    product_id: str,
    products: ProductRepository = Depends(get_product_repository)
):
    logger.info(f"Deleting product with ID: {product_id}")
    products.delete(product_id)
    return {"message": "Product deleted"}
