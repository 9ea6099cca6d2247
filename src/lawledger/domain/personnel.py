"""Personnel roster domain service."""

from decimal import Decimal
from typing import Any, Optional

from lawledger.database.base import Database
from lawledger.domain.entities import Personnel as PersonnelEntity
from lawledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    personnel_not_found,
)
from lawledger.utils.amount_parser import parse_amount

MAX_BONUS_PERCENTAGE = Decimal("100")


def validate_bonus_percentage(value: Any) -> Decimal:
    """Parse a profit-share percentage and check it lies in 0-100."""
    try:
        bonus = value if isinstance(value, Decimal) else parse_amount(str(value))
    except ValueError as e:
        raise ValidationError(f"Invalid bonus percentage: {e}") from e
    if bonus < 0 or bonus > MAX_BONUS_PERCENTAGE:
        raise ValidationError(f"Bonus percentage must be between 0 and 100, got {bonus}")
    return bonus


class PersonnelService:
    """Service for managing the staff roster."""

    def __init__(self, db: Database):
        """Initialize personnel service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_unique_name(self, full_name: str, exclude_id: Optional[str] = None) -> None:
        for person in self.db.list_personnel():
            if person.full_name == full_name and person.id != exclude_id:
                raise ConflictError(f"Personnel '{full_name}' already exists")

    def create_personnel(self, full_name: str, bonus_percentage: Any = 0, **fields: Any) -> str:
        """Add a staff member.

        Transactions refer to staff by ``full_name``, so names must be unique.

        Args:
            full_name: Staff member's full name
            bonus_percentage: Profit share as a whole percent (0-100)
            **fields: Optional role, title, email, phone, location, start_date

        Returns:
            Personnel ID

        Raises:
            ValidationError: If the name is empty or the percentage is out of range
            ConflictError: If the name is already on the roster
        """
        if not full_name or not full_name.strip():
            raise ValidationError("Personnel name cannot be empty")
        full_name = full_name.strip()
        self._check_unique_name(full_name)

        return self.db.create_personnel(
            full_name=full_name,
            bonus_percentage=validate_bonus_percentage(bonus_percentage),
            **fields,
        )

    def get_personnel(self, personnel_id: str) -> Optional[PersonnelEntity]:
        """Get a staff member by ID."""
        return self.db.get_personnel(personnel_id)

    def get_personnel_by_name(self, full_name: str) -> Optional[PersonnelEntity]:
        """Get a staff member by full name."""
        for person in self.db.list_personnel():
            if person.full_name == full_name:
                return person
        return None

    def list_personnel(self) -> list[PersonnelEntity]:
        """List the roster ordered by name."""
        return self.db.list_personnel()

    def update_personnel(self, personnel_id: str, **fields: Any) -> None:
        """Update roster fields.

        Raises:
            NotFoundError: If the entry doesn't exist
            ValidationError: If the name is empty or the percentage is out of range
            ConflictError: If the new name is already taken
        """
        if self.db.get_personnel(personnel_id) is None:
            raise NotFoundError(personnel_not_found(personnel_id))

        values = dict(fields)
        if "full_name" in values:
            name = (values["full_name"] or "").strip()
            if not name:
                raise ValidationError("Personnel name cannot be empty")
            self._check_unique_name(name, exclude_id=personnel_id)
            values["full_name"] = name
        if "bonus_percentage" in values:
            values["bonus_percentage"] = validate_bonus_percentage(values["bonus_percentage"])

        self.db.update_personnel(personnel_id, **values)

    def delete_personnel(self, personnel_id: str) -> None:
        """Remove a staff member from the roster.

        Raises:
            NotFoundError: If the entry doesn't exist
        """
        if self.db.get_personnel(personnel_id) is None:
            raise NotFoundError(personnel_not_found(personnel_id))
        self.db.delete_personnel(personnel_id)
