"""Import template domain service."""

from typing import Optional

from lawledger.database.base import Database
from lawledger.domain.entities import ImportTemplate
from lawledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    template_not_found,
)


class ImportTemplateService:
    """Service for saved spreadsheet column mappings."""

    def __init__(self, db: Database):
        """Initialize import template service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_template(self, name: str, mapping: dict[str, str]) -> str:
        """Save a column mapping under a name.

        Args:
            name: Template name
            mapping: Ledger field -> spreadsheet column header

        Returns:
            Template ID

        Raises:
            ValidationError: If the name or mapping is empty
            ConflictError: If a template with this name exists
        """
        if not name or not name.strip():
            raise ValidationError("Template name cannot be empty")
        cleaned = {field: column for field, column in mapping.items() if column}
        if not cleaned:
            raise ValidationError("Template mapping cannot be empty")
        name = name.strip()
        if self.db.get_import_template_by_name(name) is not None:
            raise ConflictError(f"Import template '{name}' already exists")
        return self.db.create_import_template(name=name, mapping=cleaned)

    def get_template(self, name: str) -> Optional[ImportTemplate]:
        """Get template by name."""
        return self.db.get_import_template_by_name(name)

    def list_templates(self) -> list[ImportTemplate]:
        """List templates ordered by name."""
        return self.db.list_import_templates()

    def delete_template(self, name: str) -> None:
        """Delete a template by name.

        Raises:
            NotFoundError: If no template has this name
        """
        template = self.db.get_import_template_by_name(name)
        if template is None:
            raise NotFoundError(template_not_found(name))
        self.db.delete_import_template(template.id)
