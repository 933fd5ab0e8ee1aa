#!/usr/bin/env python3
"""
Product Reviews Backend Startup Script
This script starts the FastAPI server.
"""

import logging

import uvicorn

from src.config import HOST, PORT

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logger.info("Starting Product Reviews Backend...")
    logger.info("Available endpoints:")
    logger.info("  - Health Check: GET /health")
    logger.info("  - Register / Login: POST /api/register, POST /api/login")
    logger.info("  - Add Product: POST /api/add")
    logger.info("  - Submit Review: POST /api/review/{product_id}")
    logger.info("  - Products With Reviews: GET /api/products-with-reviews")
    logger.info(f"  - API Docs: http://localhost:{PORT}/docs")

    uvicorn.run(
        "src.main:app",
        host=HOST,
        port=PORT,
        reload=True,
        log_level="info"
    )
