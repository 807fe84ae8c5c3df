"""User aggregate — shop accounts and administrators."""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, String

from storefront.domain import storefront


class UserRole(Enum):
    CUSTOMER = "CUSTOMER"
    SHOPKEEPER = "SHOPKEEPER"
    ADMIN = "ADMIN"


@storefront.aggregate
class User:
    username: String(required=True, max_length=50, unique=True)
    email: String(required=True, max_length=254, unique=True)
    password_hash: String(required=True, max_length=255)
    full_name: String(max_length=150)
    phone: String(max_length=20)
    role: String(choices=UserRole, default=UserRole.CUSTOMER.value)
    is_active: Boolean(default=True)
    created_at: DateTime(default=lambda: datetime.now(UTC))
    updated_at: DateTime(default=lambda: datetime.now(UTC))

    def update_profile(self, email=None, full_name=None, phone=None, role=None, is_active=None):
        for field, value in (
            ("email", email),
            ("full_name", full_name),
            ("phone", phone),
            ("role", role),
            ("is_active", is_active),
        ):
            if value is not None:
                setattr(self, field, value)
        self.updated_at = datetime.now(UTC)

    def change_password_hash(self, password_hash):
        self.password_hash = password_hash
        self.updated_at = datetime.now(UTC)
