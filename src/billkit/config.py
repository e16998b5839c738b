"""Application settings loaded from the environment."""

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Mapping, Optional

from billkit.domain.errors import ValidationError

QUOTE_SCOPE_GLOBAL = "global"
QUOTE_SCOPE_OWNER = "owner"

DEFAULT_TAX_RATE = Decimal("0.1")
DEFAULT_PAYMENT_TERMS_DAYS = 30


@dataclass(frozen=True)
class Settings:
    """Engine configuration.

    Attributes:
        tax_rate: Fraction of the subtotal charged as tax (0.1 = 10%)
        payment_terms_days: Days between issue date and due date for converted invoices
        quote_number_scope: "global" counts quote numbers across all owners,
            "owner" counts them per owner
        database_path: SQLite database file, None for the default location
        log_level: Logging level name for the billkit logger hierarchy
    """

    tax_rate: Decimal = DEFAULT_TAX_RATE
    payment_terms_days: int = DEFAULT_PAYMENT_TERMS_DAYS
    quote_number_scope: str = QUOTE_SCOPE_GLOBAL
    database_path: Optional[str] = None
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if not Decimal(0) <= self.tax_rate <= Decimal(1):
            raise ValidationError(f"Tax rate must be between 0 and 1, got {self.tax_rate}")
        if self.payment_terms_days < 0:
            raise ValidationError(
                f"Payment terms must not be negative, got {self.payment_terms_days}"
            )
        if self.quote_number_scope not in (QUOTE_SCOPE_GLOBAL, QUOTE_SCOPE_OWNER):
            raise ValidationError(
                f"Unknown quote number scope '{self.quote_number_scope}'. "
                f"Use '{QUOTE_SCOPE_GLOBAL}' or '{QUOTE_SCOPE_OWNER}'"
            )


def default_database_path() -> str:
    """Return ~/.billkit/billkit.db, creating the directory if needed."""
    db_dir = Path.home() / ".billkit"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "billkit.db")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from BILLKIT_* environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Settings instance

    Raises:
        ValidationError: If a variable holds an unusable value
    """
    if environ is None:
        environ = os.environ

    tax_rate = DEFAULT_TAX_RATE
    raw_rate = environ.get("BILLKIT_TAX_RATE")
    if raw_rate:
        try:
            tax_rate = Decimal(raw_rate.strip())
        except InvalidOperation:
            raise ValidationError(f"Could not parse BILLKIT_TAX_RATE '{raw_rate}'")

    payment_terms_days = DEFAULT_PAYMENT_TERMS_DAYS
    raw_terms = environ.get("BILLKIT_PAYMENT_TERMS_DAYS")
    if raw_terms:
        try:
            payment_terms_days = int(raw_terms)
        except ValueError:
            raise ValidationError(f"Could not parse BILLKIT_PAYMENT_TERMS_DAYS '{raw_terms}'")

    return Settings(
        tax_rate=tax_rate,
        payment_terms_days=payment_terms_days,
        quote_number_scope=environ.get("BILLKIT_QUOTE_NUMBER_SCOPE", QUOTE_SCOPE_GLOBAL).strip().lower(),
        database_path=environ.get("BILLKIT_DB_PATH") or None,
        log_level=environ.get("BILLKIT_LOG_LEVEL", "WARNING").strip().upper(),
    )
