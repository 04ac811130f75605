from sqlalchemy import Column, String, Float, Text, DateTime

from app.core.object_id import new_object_id
from app.database import Base
from app.models.categories import utcnow


class Product(Base):
    __tablename__ = "products"

    id = Column(String(24), primary_key=True, default=new_object_id)
    name = Column(String(200), index=True, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Float, index=True, nullable=False)
    # Plain reference, not a foreign key: categories may be deleted while still referenced
    category = Column(String(24), index=True, nullable=False)
    # Relative upload path ("/uploads/...") or an externally hosted absolute URL
    image_url = Column("imageURL", String(1000), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
