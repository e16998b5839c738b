"""Customer domain service."""

import re
from typing import Optional

from billkit.database.base import Database
from billkit.domain.entities import Customer as CustomerEntity
from billkit.domain.errors import (
    DependencyError,
    NotFoundError,
    ValidationError,
    customer_delete_blocked,
    customer_not_found,
    require_owner,
)

MAX_NAME_LENGTH = 100
MAX_PHONE_LENGTH = 20
MAX_ADDRESS_LENGTH = 200

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def validate_customer_fields(
    name: Optional[str],
    email: Optional[str] = None,
    phone: Optional[str] = None,
    address: Optional[str] = None,
) -> tuple[str, Optional[str], Optional[str], Optional[str]]:
    """Validate and normalize customer fields.

    Blank optional fields become None.

    Returns:
        Tuple of (name, email, phone, address)

    Raises:
        ValidationError: If a field is missing or malformed
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("Customer name is required")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"Customer name must be at most {MAX_NAME_LENGTH} characters")

    email = _blank_to_none(email)
    if email is not None and not _EMAIL_RE.match(email):
        raise ValidationError(f"Invalid email address '{email}'")

    phone = _blank_to_none(phone)
    if phone is not None and len(phone) > MAX_PHONE_LENGTH:
        raise ValidationError(f"Phone number must be at most {MAX_PHONE_LENGTH} characters")

    address = _blank_to_none(address)
    if address is not None and len(address) > MAX_ADDRESS_LENGTH:
        raise ValidationError(f"Address must be at most {MAX_ADDRESS_LENGTH} characters")

    return name, email, phone, address


class CustomerService:
    """Service for managing an owner's customers."""

    def __init__(self, db: Database, owner_id: str):
        """Initialize customer service.

        Args:
            db: Database instance
            owner_id: Owner identity
        """
        self.db = db
        self.owner_id = require_owner(owner_id)

    def create_customer(
        self,
        name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> CustomerEntity:
        """Create a customer.

        Raises:
            ValidationError: If fields are invalid
        """
        name, email, phone, address = validate_customer_fields(name, email, phone, address)
        with self.db.transaction():
            customer_id = self.db.create_customer(
                owner_id=self.owner_id, name=name, email=email, phone=phone, address=address
            )
            return self.require_customer(customer_id)

    def get_customer(self, customer_id: int) -> Optional[CustomerEntity]:
        """Get customer by ID, or None if absent or owned by someone else."""
        return self.db.get_customer(customer_id, self.owner_id)

    def require_customer(self, customer_id: int) -> CustomerEntity:
        """Get customer by ID.

        Raises:
            NotFoundError: If the customer doesn't exist for this owner
        """
        customer = self.db.get_customer(customer_id, self.owner_id)
        if customer is None:
            raise NotFoundError(customer_not_found(customer_id))
        return customer

    def list_customers(self, search: Optional[str] = None) -> list[CustomerEntity]:
        """List customers, optionally matching a name, email or phone substring."""
        return self.db.list_customers(self.owner_id, search=_blank_to_none(search))

    def update_customer(
        self,
        customer_id: int,
        name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> CustomerEntity:
        """Replace a customer's fields.

        Raises:
            NotFoundError: If the customer doesn't exist for this owner
            ValidationError: If fields are invalid
        """
        name, email, phone, address = validate_customer_fields(name, email, phone, address)
        with self.db.transaction():
            self.require_customer(customer_id)
            self.db.update_customer(customer_id, name=name, email=email, phone=phone, address=address)
            return self.require_customer(customer_id)

    def delete_customer(self, customer_id: int) -> None:
        """Delete a customer.

        Raises:
            NotFoundError: If the customer doesn't exist for this owner
            DependencyError: If quotes or invoices still reference the customer
        """
        with self.db.transaction():
            self.require_customer(customer_id)
            quote_count, invoice_count = self.db.count_customer_documents(customer_id)
            if quote_count > 0 or invoice_count > 0:
                raise DependencyError(customer_delete_blocked(customer_id, quote_count, invoice_count))
            self.db.delete_customer(customer_id)
