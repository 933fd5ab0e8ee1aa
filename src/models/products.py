"""
Products SQLAlchemy model.
"""

from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from src.db.postgres_bootstrap import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    image_url = Column(String(1024), nullable=False)

    created_at = Column(DateTime, nullable=False, server_default=func.now())

    reviews = relationship("Review", back_populates="product", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Product(id={self.id}, name={self.name}, image_url={self.image_url})>"
