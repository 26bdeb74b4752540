from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    # id rekordu w zewnetrznym katalogu, klucz upsertu przy synchronizacji
    external_id = Column(Integer, nullable=True, unique=True, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    discount_percentage = Column(Float, nullable=True)
    rating = Column(Float, nullable=True)
    stock = Column(Integer, nullable=False, default=0)
    brand = Column(String(255), nullable=True)
    sku = Column(String(100), nullable=True)
    weight = Column(Float, nullable=True)

    # {"width", "height", "depth"}
    dimensions = Column(JSON, nullable=True)
    warranty_information = Column(String(255), nullable=True)
    shipping_information = Column(String(255), nullable=True)
    availability_status = Column(String(50), nullable=True)
    # [{"rating", "comment", "date", "reviewer_name", "reviewer_email"}]
    reviews = Column(JSON, nullable=False, default=list)
    return_policy = Column(String(255), nullable=True)
    minimum_order_quantity = Column(Integer, nullable=True)

    images = Column(JSON, nullable=False, default=list)
    thumbnail = Column(String(500), nullable=True)
    tags = Column(JSON, nullable=False, default=list)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    last_sync_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    category = relationship("CategoryModel", back_populates="products")
