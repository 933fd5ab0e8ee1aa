"""User registration and login."""

import logging

import psycopg2
from passlib.context import CryptContext
from psycopg2 import errors as pg_errors

from src.config import BCRYPT_ROUNDS
from src.db.postgres_client import PostgresConnection, db
from src.errors import AuthError, ConflictError, StorageError, ValidationError

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    def __init__(self, connection: PostgresConnection, rounds: int = BCRYPT_ROUNDS):
        self.db = connection
        self.pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash_password(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return self.pwd_context.verify(password, password_hash)
        except ValueError:
            # Stored value isn't a recognizable hash
            return False

    def register(self, name: str, email: str, password: str) -> None:
        """
        Create a new user.

        Raises:
            ValidationError: a field is missing
            ConflictError: the email is already registered
            StorageError: any other database failure
        """
        if not name or not email or not password:
            raise ValidationError("All fields are required")

        password_hash = self.hash_password(password)

        try:
            with self.db.get_cursor() as cursor:
                cursor.execute(
                    """
                    INSERT INTO users (name, email, password_hash)
                    VALUES (%s, %s, %s)
                """,
                    (name, email, password_hash),
                )
        except pg_errors.UniqueViolation:
            raise ConflictError("Email already exists")
        except psycopg2.Error as e:
            logger.error(f"Error registering user: {e}")
            raise StorageError("Database error", details=str(e))

        logger.info(f"Registered user {email}")

    def login(self, email: str, password: str) -> int:
        """
        Check credentials and return the user's id.

        An unknown email and a wrong password raise the same AuthError.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        try:
            with self.db.get_cursor() as cursor:
                cursor.execute("SELECT id, password_hash FROM users WHERE email = %s", (email,))
                user = cursor.fetchone()
        except psycopg2.Error as e:
            logger.error(f"Error looking up user: {e}")
            raise StorageError("Database error", details=str(e))

        if not user or not self.verify_password(password, user["password_hash"]):
            raise AuthError(INVALID_CREDENTIALS)

        return user["id"]


# Singleton instance
auth_service = AuthService(db)
