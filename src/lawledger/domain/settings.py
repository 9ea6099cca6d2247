"""Organization settings domain service."""

import logging
from typing import Optional

from lawledger.config import DEFAULT_APP_NAME, LEGACY_APP_NAME
from lawledger.database.base import Database
from lawledger.domain.entities import OrganizationSettings
from lawledger.domain.errors import StoreError, ValidationError

logger = logging.getLogger(__name__)


class OrganizationService:
    """Service for the organization display settings."""

    def __init__(self, db: Database):
        """Initialize organization service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_settings(self) -> OrganizationSettings:
        """Return the organization settings, never failing.

        The default name is used when no row exists, the row cannot be read,
        the name is empty, or it still holds the legacy product name.
        """
        try:
            stored = self.db.get_organization_settings()
        except StoreError as e:
            logger.warning("Could not read organization settings, using defaults: %s", e)
            stored = None

        if stored is None:
            return OrganizationSettings(id=None, app_name=DEFAULT_APP_NAME)
        if not stored.app_name or stored.app_name == LEGACY_APP_NAME:
            return OrganizationSettings(
                id=stored.id, app_name=DEFAULT_APP_NAME, logo_url=stored.logo_url
            )
        return stored

    def set_app_name(self, app_name: str, logo_url: Optional[str] = None) -> None:
        """Save a new organization name, keeping the stored logo unless one is given.

        Raises:
            ValidationError: If the name is empty
        """
        if not app_name or not app_name.strip():
            raise ValidationError("Organization name cannot be empty")
        current = self.get_settings()
        self.db.save_organization_settings(
            app_name=app_name.strip(),
            logo_url=logo_url if logo_url is not None else current.logo_url,
        )
