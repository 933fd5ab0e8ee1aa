"""
Infrastructure Setup Script for the Product Reviews Backend
This script checks the database connection and creates the tables.
"""

import logging

from src.db.postgres_client import db

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def check_database_connection():
    """Check if the PostgreSQL connection is working."""
    logger.info("Checking database connection...")

    if db.check_connection():
        logger.info("✅ PostgreSQL connection: OK")
        return True

    logger.error("❌ PostgreSQL connection: Failed")
    return False


def check_data_availability():
    """Report how much data is already loaded."""
    try:
        with db.get_cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM products")
            product_count = cursor.fetchone()["count"]
            logger.info(f"📦 Products in database: {product_count}")

            cursor.execute("SELECT COUNT(*) FROM reviews")
            review_count = cursor.fetchone()["count"]
            logger.info(f"📝 Reviews in database: {review_count}")

            if product_count == 0:
                logger.warning("⚠️ No products found. Add some with POST /api/add.")
    except Exception as e:
        logger.error(f"Error checking data: {e}")
        return False

    return True


def main():
    """Main setup function."""
    logger.info("🚀 Setting up Product Reviews Backend...")

    if not check_database_connection():
        logger.error("❌ Database connection check failed!")
        return False

    db.create_tables()
    check_data_availability()

    logger.info("✅ Setup complete! Ready to start the server.")
    return True


if __name__ == "__main__":
    main()
