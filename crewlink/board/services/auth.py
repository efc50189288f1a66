"""Email + PIN login check against the contractors board."""

from __future__ import annotations

import logging
import re
from dataclasses import replace

from ..core.config import ContractorColumns
from ..core.exceptions import ValidationError
from ..models import LoginResult, Record, normalize_email
from ..runtime.paging import PageCoordinator, PageQuery
from .assignments import contractors_query

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
PIN_PATTERN = re.compile(r"^\d{4}$")


def login_query(columns: ContractorColumns) -> PageQuery:
    """Contractors query that keeps every column, so the PIN fallback can see them."""
    query = contractors_query(columns)
    return replace(
        query, field_filter=query.field_filter.model_copy(update={"all_fields": True})
    )


def normalize_pin(text: str) -> str:
    """Digits only, left-padded to four when shorter."""
    digits = re.sub(r"\D", "", text)
    if 0 < len(digits) < 4:
        digits = digits.zfill(4)
    return digits


class AuthService:
    """Verifies a contractor's email and 4-digit PIN."""

    def __init__(self, coordinator: PageCoordinator, columns: ContractorColumns) -> None:
        self._coordinator = coordinator
        self._columns = columns
        self._query = login_query(columns)

    def stored_pin(self, record: Record) -> str:
        """PIN stored on a contractor row.

        Falls back to any 4-digit text on the row when the PIN column is not
        configured or does not hold four digits.
        """
        stored = record.text(self._columns.pin_column_id).strip()
        if not PIN_PATTERN.match(stored):
            guess = next(
                (
                    value.text.strip()
                    for value in record.fields.values()
                    if PIN_PATTERN.match(value.text.strip())
                ),
                None,
            )
            if guess is not None:
                stored = guess
        return normalize_pin(stored)

    async def verify_login(self, email: str, pin: str) -> LoginResult:
        """Check an email/PIN pair.

        Raises:
            ValidationError: If the email or PIN is malformed
            UpstreamError: If a page fetch fails
        """
        email_key = normalize_email(email)
        pin = (pin or "").strip()
        if not email_key or not EMAIL_PATTERN.match(email_key) or not PIN_PATTERN.match(pin):
            raise ValidationError("Invalid email or PIN format.")

        contractor = await self._coordinator.find_first(
            self._query,
            lambda record: normalize_email(record.text(self._columns.email_column_id)) == email_key,
        )
        if contractor is None or self.stored_pin(contractor) != pin:
            logger.info("login_rejected", extra={"found": contractor is not None})
            return LoginResult(ok=False)
        return LoginResult(ok=True, name=contractor.name)
