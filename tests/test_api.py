"""Tests for the HTTP endpoints, with the service layer patched out."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from src.errors import AuthError, ConflictError, StorageError, ValidationError
from src.main import app


@pytest.fixture
def client():
    # Not used as a context manager, so the startup DB check doesn't run
    return TestClient(app)


class TestReviewEndpoint:
    @pytest.fixture
    def mock_review_service(self):
        with patch("src.main.review_service") as mock_service:
            yield mock_service

    def test_submit_review(self, client, mock_review_service):
        mock_review_service.submit_review.return_value = 1

        response = client.post("/api/review/3", data={"userId": "7", "rating": "4", "reviewText": "Nice"})

        assert response.status_code == 200
        assert response.json() == {"message": "Review submitted"}
        kwargs = mock_review_service.submit_review.call_args.kwargs
        assert kwargs["product_id"] == 3
        assert kwargs["user_id"] == 7
        assert kwargs["rating"] == 4
        assert kwargs["review_text"] == "Nice"
        assert kwargs["photo"] is None

    def test_submit_review_with_photo(self, client, mock_review_service):
        response = client.post(
            "/api/review/3",
            data={"userId": "7", "rating": "5"},
            files={"photo": ("run.jpg", b"jpeg-bytes", "image/jpeg")},
        )

        assert response.status_code == 200
        kwargs = mock_review_service.submit_review.call_args.kwargs
        assert kwargs["photo_name"] == "run.jpg"
        assert kwargs["photo"] is not None

    def test_invalid_rating(self, client, mock_review_service):
        mock_review_service.submit_review.side_effect = ValidationError("Invalid input")

        response = client.post("/api/review/3", data={"userId": "7", "rating": "9"})

        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid input"}

    def test_non_numeric_rating(self, client, mock_review_service):
        response = client.post("/api/review/3", data={"userId": "7", "rating": "great"})

        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid input"}
        mock_review_service.submit_review.assert_not_called()

    def test_duplicate_review(self, client, mock_review_service):
        mock_review_service.submit_review.side_effect = ConflictError("Review already submitted")

        response = client.post("/api/review/3", data={"userId": "7", "rating": "4"})

        assert response.status_code == 400
        assert response.json() == {"detail": "Review already submitted"}

    def test_storage_failure(self, client, mock_review_service):
        mock_review_service.submit_review.side_effect = StorageError("Insert failed", details="boom")

        response = client.post("/api/review/3", data={"userId": "7", "rating": "4"})

        assert response.status_code == 500
        assert response.json() == {"detail": "Insert failed: boom"}


class TestAuthEndpoints:
    @pytest.fixture
    def mock_auth_service(self):
        with patch("src.main.auth_service") as mock_service:
            yield mock_service

    def test_register(self, client, mock_auth_service):
        response = client.post("/api/register", json={"name": "Bob", "email": "bob@example.com", "password": "pw"})

        assert response.status_code == 201
        assert response.json() == {"message": "User registered successfully"}
        mock_auth_service.register.assert_called_once_with("Bob", "bob@example.com", "pw")

    def test_register_missing_field(self, client, mock_auth_service):
        response = client.post("/api/register", json={"name": "Bob", "email": "bob@example.com"})

        assert response.status_code == 400
        assert response.json() == {"detail": "All fields are required"}
        mock_auth_service.register.assert_not_called()

    def test_register_empty_field(self, client, mock_auth_service):
        response = client.post("/api/register", json={"name": "", "email": "bob@example.com", "password": "pw"})

        assert response.status_code == 400
        assert response.json() == {"detail": "All fields are required"}
        assert "pw" not in response.text
        mock_auth_service.register.assert_not_called()

    def test_register_duplicate_email(self, client, mock_auth_service):
        mock_auth_service.register.side_effect = ConflictError("Email already exists")

        response = client.post("/api/register", json={"name": "Bob", "email": "bob@example.com", "password": "pw"})

        assert response.status_code == 400
        assert response.json() == {"detail": "Email already exists"}

    def test_login(self, client, mock_auth_service):
        mock_auth_service.login.return_value = 7

        response = client.post("/api/login", json={"email": "bob@example.com", "password": "pw"})

        assert response.status_code == 200
        assert response.json() == {"message": "Login successful", "userId": 7}

    def test_login_invalid_credentials(self, client, mock_auth_service):
        mock_auth_service.login.side_effect = AuthError("Invalid credentials")

        response = client.post("/api/login", json={"email": "bob@example.com", "password": "nope"})

        assert response.status_code == 401
        assert response.json() == {"detail": "Invalid credentials"}

    def test_login_missing_field(self, client, mock_auth_service):
        response = client.post("/api/login", json={"email": "bob@example.com"})

        assert response.status_code == 400
        assert response.json() == {"detail": "Email and password are required"}

    def test_login_invalid_body_does_not_echo_password(self, client, mock_auth_service):
        response = client.post("/api/login", json={"email": "", "password": "hunter2-secret"})

        assert response.status_code == 400
        assert isinstance(response.json()["detail"], str)
        assert "hunter2-secret" not in response.text
        mock_auth_service.login.assert_not_called()


class TestProductEndpoints:
    @pytest.fixture
    def mock_product_service(self):
        with patch("src.main.product_service") as mock_service:
            yield mock_service

    def test_add_product(self, client, mock_product_service):
        mock_product_service.add_product.return_value = 5

        response = client.post("/api/add", json={"name": "Mat", "imageUrl": "http://example.com/mat.jpg"})

        assert response.status_code == 201
        assert response.json() == {"message": "Product added successfully", "productId": 5}
        mock_product_service.add_product.assert_called_once_with("Mat", "http://example.com/mat.jpg")

    def test_add_product_missing_image(self, client, mock_product_service):
        response = client.post("/api/add", json={"name": "Mat"})

        assert response.status_code == 400
        assert response.json() == {"detail": "Product name and image URL are required"}
        mock_product_service.add_product.assert_not_called()

    def test_add_product_storage_failure(self, client, mock_product_service):
        mock_product_service.add_product.side_effect = StorageError("Failed to add product")

        response = client.post("/api/add", json={"name": "Mat", "imageUrl": "http://example.com/mat.jpg"})

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to add product"}

    def test_products_with_reviews(self, client, mock_product_service):
        products = [
            {
                "id": 1,
                "name": "A",
                "image": "a.jpg",
                "rating": {"avg": 5.0, "count": 1},
                "reviews": [
                    {
                        "id": 10,
                        "rating": 5,
                        "comment": None,
                        "imageUrl": None,
                        "createdAt": None,
                        "user": {"id": 7, "name": "Bob"},
                    }
                ],
            },
            {"id": 2, "name": "B", "image": "b.jpg", "rating": {"avg": 0, "count": 0}, "reviews": []},
        ]
        mock_product_service.list_products_with_reviews.return_value = products

        response = client.get("/api/products-with-reviews")

        assert response.status_code == 200
        assert response.json() == products

    def test_products_with_reviews_storage_failure(self, client, mock_product_service):
        mock_product_service.list_products_with_reviews.side_effect = StorageError("Database error")

        response = client.get("/api/products-with-reviews")

        assert response.status_code == 500


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_startup_creates_upload_dir(tmp_path):
    """The uploads directory is made when the app starts, not when it is imported."""
    upload_dir = tmp_path / "uploads"

    with patch("src.main.UPLOAD_DIR", str(upload_dir)), patch("src.main.db") as mock_db:
        mock_db.check_connection.return_value = True
        assert not upload_dir.exists()
        with TestClient(app):
            assert upload_dir.is_dir()

    mock_db.close.assert_called_once()
