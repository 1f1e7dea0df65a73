"""HTTP presentation layer for the tenancy bounded context."""

from tenancy.presentation.routes import router

__all__ = ["router"]
