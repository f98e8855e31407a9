"""Storage backends behind a common repository interface."""

from storefront.repositories.base import Repository
from storefront.repositories.document import DocumentRepository
from storefront.repositories.sql import SqlRepository

__all__ = ["DocumentRepository", "Repository", "SqlRepository"]
