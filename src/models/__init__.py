"""
Init file for the SQLAlchemy models.
"""

from .products import Product
from .reviews import Review
from .users import User

__all__ = [
    "Product",
    "Review",
    "User",
]
