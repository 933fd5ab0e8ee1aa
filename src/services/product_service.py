"""Product creation and the products-with-reviews listing."""

import logging
from typing import Any

import psycopg2

from src.db.postgres_client import PostgresConnection, db
from src.errors import StorageError, ValidationError
from src.utils.review_aggregator import aggregate_product_rows

logger = logging.getLogger(__name__)

PRODUCTS_WITH_REVIEWS_SQL = """
    SELECT
        p.id AS product_id,
        p.name AS product_name,
        p.image_url AS product_image,
        r.id AS review_id,
        r.rating,
        r.review_text,
        r.image_url AS review_image,
        r.created_at,
        u.id AS user_id,
        u.name AS user_name,
        avg_table.avg_rating,
        avg_table.rating_count
    FROM products p
    LEFT JOIN reviews r ON p.id = r.product_id
    LEFT JOIN users u ON r.user_id = u.id
    LEFT JOIN (
        SELECT
            product_id,
            ROUND(AVG(rating), 1) AS avg_rating,
            COUNT(*) AS rating_count
        FROM reviews
        GROUP BY product_id
    ) AS avg_table ON p.id = avg_table.product_id
    ORDER BY p.id, r.created_at DESC
"""


class ProductService:
    def __init__(self, connection: PostgresConnection):
        self.db = connection

    def add_product(self, name: str, image_url: str) -> int:
        """
        Insert a product.

        Returns:
            The generated product id
        """
        if not name or not image_url:
            raise ValidationError("Product name and image URL are required")

        try:
            with self.db.get_cursor() as cursor:
                cursor.execute(
                    """
                    INSERT INTO products (name, image_url)
                    VALUES (%s, %s)
                    RETURNING id
                """,
                    (name, image_url),
                )
                product_id = cursor.fetchone()["id"]
        except psycopg2.Error as e:
            logger.error(f"Error adding product: {e}")
            raise StorageError("Failed to add product", details=str(e))

        logger.info(f"Added product {product_id}: {name}")
        return product_id

    def list_products_with_reviews(self) -> list[dict[str, Any]]:
        """Every product with its rating summary and reviews, newest review first."""
        try:
            with self.db.get_cursor() as cursor:
                cursor.execute(PRODUCTS_WITH_REVIEWS_SQL)
                rows = cursor.fetchall()
        except psycopg2.Error as e:
            logger.error(f"Error fetching products with reviews: {e}")
            raise StorageError("Database error", details=str(e))

        return aggregate_product_rows(rows)


# Singleton instance
product_service = ProductService(db)
