"""Category domain service."""

from typing import Any, Optional

from lawledger.database.base import Database
from lawledger.domain.entities import Category as CategoryEntity
from lawledger.domain.errors import ConflictError, NotFoundError, ValidationError
from lawledger.domain.normalizer import coerce_type


class CategoryService:
    """Service for managing transaction categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(self, name: str, type: Any) -> str:
        """Create a category.

        Args:
            name: Category name
            type: Transaction type the category applies to (label or name)

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is empty or the type is unknown
            ConflictError: If a category with the same name exists
        """
        if not name or not name.strip():
            raise ValidationError("Category name cannot be empty")
        tx_type = coerce_type(type)
        if tx_type is None:
            raise ValidationError(f"Unknown transaction type '{type}'")

        name = name.strip()
        if self.db.get_category_by_name(name) is not None:
            raise ConflictError(f"Category '{name}' already exists")

        return self.db.create_category(name=name, type=tx_type.value)

    def get_category_by_name(self, name: str) -> Optional[CategoryEntity]:
        """Get category by name."""
        return self.db.get_category_by_name(name)

    def list_categories(self, type: Any = None) -> list[CategoryEntity]:
        """List categories, optionally only those for one transaction type."""
        categories = self.db.list_categories()
        if type is None:
            return categories
        tx_type = coerce_type(type)
        if tx_type is None:
            raise ValidationError(f"Unknown transaction type '{type}'")
        return [c for c in categories if c.type == tx_type.value]

    def delete_category(self, name: str) -> None:
        """Delete a category by name.

        Raises:
            NotFoundError: If the category doesn't exist
        """
        category = self.db.get_category_by_name(name)
        if category is None:
            raise NotFoundError(f"Category '{name}' not found")
        self.db.delete_category(category.id)
