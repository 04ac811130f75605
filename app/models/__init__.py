# package marker for app.models

# Import all models so they are registered on the metadata
from app.models.categories import Category
from app.models.products import Product

__all__ = [
    "Category",
    "Product",
]
