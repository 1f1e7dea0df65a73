"""Database-specific exceptions shared by the directory and tenant stores."""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when a database connection cannot be established."""

    def __init__(self, message: str, database: str | None = None):
        super().__init__(message)
        self.database = database


class ProvisioningError(DatabaseError):
    """Raised when a tenant database cannot be created."""

    def __init__(self, message: str, database: str | None = None):
        super().__init__(message)
        self.database = database
