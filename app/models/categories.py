from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime

from app.core.object_id import new_object_id
from app.database import Base


def utcnow():
    return datetime.now(timezone.utc)


class Category(Base):
    """
    Category model for product categorization.
    Names are unique (exact, case-sensitive match).
    """
    __tablename__ = "categories"

    id = Column(String(24), primary_key=True, default=new_object_id)
    name = Column(String(200), unique=True, index=True, nullable=False)
    description = Column(String(1000), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
