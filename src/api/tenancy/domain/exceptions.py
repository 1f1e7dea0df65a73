"""Domain exceptions for the tenancy bounded context."""


class InvalidTenantIdentifierError(ValueError):
    """Raised when a tenant identifier violates the slug rules.

    Identifiers are lowercase, 3-30 characters, and may only contain
    letters, digits and hyphens.
    """

    pass


class InvalidTenantStatusError(ValueError):
    """Raised when a tenant cannot be moved to the requested status.

    Administrators may set ``active``, ``suspended`` or ``cancelled``;
    ``trial`` is only ever assigned at registration.
    """

    pass
