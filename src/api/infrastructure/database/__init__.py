"""Database infrastructure - shared connection primitives."""

from infrastructure.database.exceptions import (
    DatabaseConnectionError,
    DatabaseError,
    ProvisioningError,
)

__all__ = [
    "DatabaseConnectionError",
    "DatabaseError",
    "ProvisioningError",
]
