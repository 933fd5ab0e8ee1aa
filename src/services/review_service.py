"""Review submission with optional photo upload."""

import logging
from typing import BinaryIO

import psycopg2
from psycopg2 import errors as pg_errors

from src.db.postgres_client import PostgresConnection, db
from src.errors import ConflictError, StorageError, ValidationError
from src.services.upload_service import UploadStorage, upload_storage

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5

ALREADY_SUBMITTED = "Review already submitted"


class ReviewService:
    def __init__(self, connection: PostgresConnection, uploads: UploadStorage):
        self.db = connection
        self.uploads = uploads

    def _validate(self, user_id: int | None, rating: int | None):
        if not user_id or rating is None or not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError("Invalid input")

    def _review_exists(self, user_id: int, product_id: int) -> bool:
        with self.db.get_cursor() as cursor:
            cursor.execute(
                "SELECT 1 FROM reviews WHERE user_id = %s AND product_id = %s",
                (user_id, product_id),
            )
            return cursor.fetchone() is not None

    def submit_review(
        self,
        product_id: int,
        user_id: int | None,
        rating: int | None,
        review_text: str | None = None,
        photo_name: str | None = None,
        photo: BinaryIO | None = None,
    ) -> int:
        """
        Store a user's review of a product.

        Args:
            product_id: Product being reviewed
            user_id: Reviewing user
            rating: Integer score between 1 and 5
            review_text: Optional comment
            photo_name: Client filename of the attached photo
            photo: Optional photo contents

        Returns:
            The new review id

        Raises:
            ValidationError: user id or rating missing, or rating out of range
            ConflictError: the user already reviewed this product
            StorageError: the database failed
        """
        self._validate(user_id, rating)

        try:
            if self._review_exists(user_id, product_id):
                raise ConflictError(ALREADY_SUBMITTED)
        except psycopg2.Error as e:
            logger.error(f"Error checking for existing review: {e}")
            raise StorageError("DB error", details=str(e))

        image_url = self.uploads.save(photo_name, photo)

        try:
            with self.db.get_cursor() as cursor:
                cursor.execute(
                    """
                    INSERT INTO reviews (user_id, product_id, rating, review_text, image_url)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING id
                """,
                    (user_id, product_id, rating, review_text, image_url),
                )
                review_id = cursor.fetchone()["id"]
        except pg_errors.UniqueViolation:
            # Lost a race with a concurrent submission for the same pair
            self.uploads.delete(image_url)
            raise ConflictError(ALREADY_SUBMITTED)
        except psycopg2.Error as e:
            logger.error(f"Error inserting review: {e}")
            self.uploads.delete(image_url)
            raise StorageError("Insert failed", details=str(e))

        logger.info(f"User {user_id} reviewed product {product_id} with rating {rating}")
        return review_id


# Singleton instance
review_service = ReviewService(db, upload_storage)
