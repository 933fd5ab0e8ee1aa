"""PostgreSQL connection and utilities."""

import logging
import threading
from contextlib import contextmanager

from psycopg2.extras import RealDictCursor
from psycopg2.pool import PoolError, ThreadedConnectionPool
from sqlalchemy import create_engine

from src.config import DB_POOL_MAX, DB_POOL_MIN, DB_POOL_TIMEOUT, POSTGRES_CONFIG
from src.db.postgres_bootstrap import Base
from src.models import *  # Needed for Base metadata

logger = logging.getLogger(__name__)


class PostgresConnection:
    def __init__(
        self,
        config: dict | None = None,
        min_connections: int = DB_POOL_MIN,
        max_connections: int = DB_POOL_MAX,
        pool_timeout: float = DB_POOL_TIMEOUT,
    ):
        self.config = config or POSTGRES_CONFIG
        self.min_connections = min_connections
        self.max_connections = max_connections
        self.pool_timeout = pool_timeout
        self._engine = None
        self._pool = None
        self._pool_lock = threading.Lock()
        # One slot per pooled connection, so callers wait instead of hitting PoolError
        self._slots = threading.BoundedSemaphore(max_connections)

    @property
    def engine(self):
        if not self._engine:
            db_url = (
                f"postgresql+psycopg2://{self.config['user']}:{self.config['password']}@"
                f"{self.config['host']}:{self.config['port']}/{self.config['database']}"
            )
            self._engine = create_engine(db_url)
        return self._engine

    @property
    def pool(self):
        if not self._pool:
            with self._pool_lock:
                if not self._pool:
                    self._pool = ThreadedConnectionPool(self.min_connections, self.max_connections, **self.config)
        return self._pool

    @contextmanager
    def get_cursor(self):
        """
        Get a database cursor for raw SQL queries.

        Waits up to pool_timeout seconds for a free connection when all of them
        are in use. The connection goes back to the pool afterwards.
        """
        if not self._slots.acquire(timeout=self.pool_timeout):
            raise PoolError(f"No free connection after {self.pool_timeout}s")
        try:
            conn = self.pool.getconn()
        except Exception:
            self._slots.release()
            raise

        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                yield cursor
                conn.commit()
        except Exception as e:
            conn.rollback()
            raise e
        finally:
            self.pool.putconn(conn)
            self._slots.release()

    def check_connection(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self.get_cursor() as cursor:
                cursor.execute("SELECT 1")
                return cursor.fetchone() is not None
        except Exception as e:
            logger.error(f"Error connecting to DB: {e}")
            return False

    def create_tables(self):
        """Create all tables in the database."""
        logger.log(logging.INFO, "Creating tables...")

        try:
            Base.metadata.create_all(self.engine)
            logger.log(logging.INFO, "Tables created successfully.")
        except Exception as e:
            logger.log(logging.ERROR, f"Error creating tables: {e}")
            raise e

    def close(self):
        with self._pool_lock:
            if self._pool:
                self._pool.closeall()
                self._pool = None
        if self._engine:
            self._engine.dispose()
            self._engine = None


# Singleton instance
db = PostgresConnection()
