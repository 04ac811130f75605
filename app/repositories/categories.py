import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateNameError, NotFoundError
from app.models.categories import Category

logger = logging.getLogger(__name__)


class CategoryRepository:
    """
    CRUD and substring search over categories.

    Every failure is raised to the caller; nothing is logged and swallowed.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, name: str, description: Optional[str] = None) -> Category:
        """
        Create a category.

        Raises:
            DuplicateNameError: If a category with exactly this name exists
        """
        existing = self.db.query(Category).filter(Category.name == name).first()
        if existing:
            logger.warning(f"Category already exists: {name}")
            raise DuplicateNameError("Category already exists")

        category = Category(name=name, description=description or "")
        self.db.add(category)
        try:
            self.db.commit()
        except IntegrityError as e:
            # Lost a race against a concurrent create with the same name
            self.db.rollback()
            raise DuplicateNameError("Category already exists") from e
        self.db.refresh(category)

        logger.info(f"Created category {category.name} (ID: {category.id})")
        return category

    def list(self, query: Optional[str] = None) -> List[Category]:
        """Categories whose name contains ``query`` (case-insensitive), newest first"""
        categories = self.db.query(Category)
        if query:
            categories = categories.filter(
                func.lower(Category.name).contains(query.lower(), autoescape=True)
            )
        return categories.order_by(Category.created_at.desc(), Category.id.desc()).all()

    def get_by_id(self, category_id: str) -> Category:
        category = self.db.get(Category, category_id)
        if category is None:
            logger.warning(f"Category with ID {category_id} not found")
            raise NotFoundError("Category not found")
        return category

    def update(self, category_id: str, fields: dict) -> Category:
        """
        Merge the supplied fields onto an existing category.

        Raises:
            NotFoundError: If the category does not exist
            DuplicateNameError: If a rename collides with another category
        """
        category = self.get_by_id(category_id)

        if "name" in fields and fields["name"] is not None:
            category.name = fields["name"]
        if "description" in fields:
            category.description = fields["description"] or ""

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Rename of category {category_id} collides with an existing name")
            raise DuplicateNameError("Category already exists") from e
        self.db.refresh(category)

        logger.info(f"Updated category {category.name} (ID: {category.id})")
        return category

    def delete(self, category_id: str) -> None:
        """Delete a category; products that reference it are left untouched"""
        category = self.get_by_id(category_id)
        self.db.delete(category)
        self.db.commit()
        logger.info(f"Deleted category with ID: {category_id}")

