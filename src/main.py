"""FastAPI application for the product review backend."""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field

from src.config import CORS_ORIGINS, UPLOAD_DIR, UPLOAD_URL_PREFIX
from src.db.postgres_client import db
from src.errors import AuthError, ConflictError, ServiceError, StorageError, ValidationError
from src.services.auth_service import auth_service
from src.services.product_service import product_service
from src.services.review_service import review_service

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    os.makedirs(UPLOAD_DIR, exist_ok=True)
    if db.check_connection():
        logger.info("Connected to DB")
    else:
        logger.error("Could not connect to DB, requests will fail until it is reachable")
    yield
    db.close()


# Create FastAPI app
app = FastAPI(
    title="Product Reviews API",
    description="Users, products and product reviews with photo uploads",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# The directory is created at startup, not on import
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=UPLOAD_DIR, check_dir=False), name="uploads")


# Pydantic models for request bodies
class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AddProductRequest(BaseModel):
    name: str = Field(..., min_length=1)
    imageUrl: str = Field(..., min_length=1)


# Messages for requests that fail schema validation, matching the service-level ones
VALIDATION_MESSAGES = {
    "/api/register": "All fields are required",
    "/api/login": "Email and password are required",
    "/api/add": "Product name and image URL are required",
}


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Missing or malformed fields are a plain 400 with a single message. The submitted body is never echoed."""
    path = request.url.path
    if path.startswith("/api/review/"):
        message = "Invalid input"
    else:
        message = VALIDATION_MESSAGES.get(path, "Invalid request")
    logger.info(f"Rejected request to {path}: {len(exc.errors())} invalid field(s)")
    return JSONResponse(status_code=400, content={"detail": message})


def _to_http_error(error: ServiceError) -> HTTPException:
    """Map a service exception to the HTTP status it is reported with."""
    if isinstance(error, AuthError):
        return HTTPException(status_code=401, detail=error.message)
    if isinstance(error, (ValidationError, ConflictError)):
        return HTTPException(status_code=400, detail=error.message)
    if isinstance(error, StorageError) and error.details:
        return HTTPException(status_code=500, detail=f"{error.message}: {error.details}")
    return HTTPException(status_code=500, detail=error.message)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "Product Reviews API"}


@app.post("/api/review/{product_id}")
def submit_review(
    product_id: int,
    userId: Optional[int] = Form(None),
    rating: Optional[int] = Form(None),
    reviewText: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
):
    """Submit a review, optionally with a photo."""
    try:
        review_service.submit_review(
            product_id=product_id,
            user_id=userId,
            rating=rating,
            review_text=reviewText,
            photo_name=photo.filename if photo else None,
            photo=photo.file if photo else None,
        )
        return {"message": "Review submitted"}
    except ServiceError as e:
        raise _to_http_error(e)


@app.post("/api/register", status_code=201)
def register(request: RegisterRequest):
    """Register a new user."""
    try:
        auth_service.register(request.name, request.email, request.password)
        return {"message": "User registered successfully"}
    except ServiceError as e:
        raise _to_http_error(e)


@app.post("/api/login")
def login(request: LoginRequest):
    """Log a user in and return their id."""
    try:
        user_id = auth_service.login(request.email, request.password)
        return {"message": "Login successful", "userId": user_id}
    except ServiceError as e:
        raise _to_http_error(e)


@app.post("/api/add", status_code=201)
def add_product(request: AddProductRequest):
    """Add a new product."""
    try:
        product_id = product_service.add_product(request.name, request.imageUrl)
        return {"message": "Product added successfully", "productId": product_id}
    except ServiceError as e:
        raise _to_http_error(e)


@app.get("/api/products-with-reviews")
def get_products_with_reviews():
    """All products with their rating summary and reviews."""
    try:
        return product_service.list_products_with_reviews()
    except ServiceError as e:
        raise _to_http_error(e)


if __name__ == "__main__":
    import uvicorn

    from src.config import HOST, PORT

    uvicorn.run(app, host=HOST, port=PORT)
