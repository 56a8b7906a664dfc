"""
Business settings service (currency, billing day, late fee policy).
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import FailedPreconditionError, InvalidInputError
from ..database.models import Settings, LateFeeType, SETTINGS_ID
from .billing_rules import LateFeeConfig, to_money

logger = logging.getLogger(__name__)


class SettingsService:

    def __init__(self, db: Session):
        self.db = db

    def get_settings(self) -> Optional[Settings]:
        return self.db.get(Settings, SETTINGS_ID)

    def get_or_create(self) -> Settings:
        """Return the settings row, creating it with defaults on first use."""
        settings = self.get_settings()
        if settings:
            return settings

        settings = Settings(id=SETTINGS_ID)
        self.db.add(settings)
        try:
            self.db.commit()
        except IntegrityError:
            # created concurrently
            self.db.rollback()
            settings = self.get_settings()
        return settings

    def require_late_fee_config(self) -> LateFeeConfig:
        settings = self.get_settings()
        if settings is None:
            raise FailedPreconditionError("Settings not configured")
        return LateFeeConfig.from_settings(settings)

    def update_settings(self, changes: dict) -> Settings:
        """Apply the provided fields; absent keys are left untouched."""
        settings = self.get_or_create()

        if "late_fee_type" in changes:
            valid = [t.value for t in LateFeeType]
            if changes["late_fee_type"] not in valid:
                raise InvalidInputError(
                    f"Late fee type must be one of: {', '.join(valid)}", field="late_fee_type"
                )
            settings.late_fee_type = changes["late_fee_type"]

        if "currency" in changes:
            if not changes["currency"]:
                raise InvalidInputError("Currency cannot be empty", field="currency")
            settings.currency = changes["currency"]

        if "default_billing_day" in changes:
            day = changes["default_billing_day"]
            if day is None or not 1 <= day <= 31:
                raise InvalidInputError(
                    "Default billing day must be between 1 and 31", field="default_billing_day"
                )
            settings.default_billing_day = day

        if "grace_days" in changes:
            if changes["grace_days"] is None or changes["grace_days"] < 0:
                raise InvalidInputError("Grace days must be zero or more", field="grace_days")
            settings.grace_days = changes["grace_days"]

        for name in ("per_day_amount", "percentage"):
            if name in changes:
                value = changes[name]
                if value is None or value < 0:
                    raise InvalidInputError(f"{name} must be zero or a positive number", field=name)
                setattr(settings, name, to_money(value))

        self.db.commit()
        logger.info(f"Settings updated: {', '.join(sorted(changes))}")
        return settings
