import logging
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.core.object_id import is_object_id
from app.models.categories import Category
from app.models.products import Product
from app.schemas.products import CategoryRef, ProductFields, ProductResponse
from app.services.images import resolve_image_url

logger = logging.getLogger(__name__)

# Shown for products whose category has been deleted
UNCATEGORIZED = "Uncategorized"


class ProductRepository:
    """
    CRUD and filtered search over products.

    Stored image references are kept as written (relative upload path or
    external URL); ``to_response`` resolves them to absolute URLs and joins
    in the category name.
    """

    def __init__(self, db: Session):
        self.db = db

    def _with_category_name(self):
        return self.db.query(Product, Category.name).outerjoin(
            Category, Category.id == Product.category
        )

    def create(self, fields: ProductFields) -> Product:
        product = Product(
            name=fields.name,
            description=fields.description,
            price=float(fields.price),
            category=fields.category,
            image_url=fields.image_url or "",
        )
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)

        logger.info(f"Created product {product.name} (ID: {product.id})")
        return product

    def get_by_id(self, product_id: str) -> Product:
        product = self.db.get(Product, product_id)
        if product is None:
            logger.warning(f"Product with ID {product_id} not found")
            raise NotFoundError("Product not found")
        return product

    def update(self, product_id: str, fields: ProductFields) -> Product:
        """
        Replace the product's fields.

        The stored image reference is kept unless ``fields.image_url`` is set.

        Raises:
            NotFoundError: If the product does not exist
        """
        product = self.get_by_id(product_id)

        product.name = fields.name
        product.description = fields.description
        product.price = float(fields.price)
        product.category = fields.category
        if fields.image_url:
            product.image_url = fields.image_url

        self.db.commit()
        self.db.refresh(product)

        logger.info(f"Updated product {product.name} (ID: {product.id})")
        return product

    def delete(self, product_id: str) -> None:
        product = self.get_by_id(product_id)
        self.db.delete(product)
        self.db.commit()
        logger.info(f"Deleted product with ID: {product_id}")

    def search(
        self,
        q: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> List[Tuple[Product, Optional[str]]]:
        """
        Products matching every supplied filter, paired with their category name.

        Args:
            q: Case-insensitive substring of the product name
            category: Exact category ID; ignored when not a valid ID
            min_price: Inclusive lower bound
            max_price: Inclusive upper bound
        """
        query = self._with_category_name()

        if q:
            query = query.filter(func.lower(Product.name).contains(q.lower(), autoescape=True))

        if category:
            if is_object_id(category):
                query = query.filter(Product.category == category.lower())
            else:
                logger.info(f"Ignoring malformed category filter: {category}")

        if min_price is not None:
            query = query.filter(Product.price >= min_price)
        if max_price is not None:
            query = query.filter(Product.price <= max_price)

        return query.order_by(Product.created_at.desc(), Product.id.desc()).all()

    def category_name(self, product: Product) -> Optional[str]:
        category = self.db.get(Category, product.category)
        return category.name if category else None

    def to_response(self, product: Product, category_name: Optional[str] = None) -> ProductResponse:
        """Map a stored product to its client representation"""
        if category_name is None:
            category_name = self.category_name(product)

        return ProductResponse(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            category=CategoryRef(id=product.category, name=category_name or UNCATEGORIZED),
            imageURL=resolve_image_url(product.image_url),
            created_at=product.created_at,
            updated_at=product.updated_at,
        )
