"""
Declarative base for the users, products and reviews models.
Lives apart from postgres_client so the models can import it without a cycle."""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
