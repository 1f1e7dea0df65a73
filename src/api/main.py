"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import async_sessionmaker

from infrastructure.database.engines import create_directory_engine
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import (
    get_auth_settings,
    get_database_settings,
    get_settings,
    get_tenancy_settings,
)
from infrastructure.version import __version__
from shared_kernel.auth import DefaultJWTValidatorProbe, JWTValidator
from tenancy.application import (
    ScopedDataHandleCache,
    TenantRegistry,
    TenantResolver,
)
from tenancy.application.services import TenantService
from tenancy.dependencies import get_handle_cache
from tenancy.infrastructure import (
    SqlAlchemyScopedStoreFactory,
    SqlAlchemyTenantDirectory,
)
from tenancy.presentation import routes as tenancy_routes


@asynccontextmanager
async def tenancy_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Directory engine and tenant registry creation
    - Scoped data handle cache, credential verifier and resolver wiring
    - Release of every tenant store and the directory pool on shutdown
    """
    settings = get_settings()
    configure_logging(debug=settings.debug)
    db_settings = get_database_settings()
    auth_settings = get_auth_settings()
    tenancy_settings = get_tenancy_settings()
    probe = DefaultStartupProbe()

    engine = create_directory_engine(db_settings)
    sessionmaker = async_sessionmaker(engine, expire_on_commit=False)

    directory = SqlAlchemyTenantDirectory(sessionmaker)
    registry = TenantRegistry(directory)
    store_factory = SqlAlchemyScopedStoreFactory(
        db_settings, pool_size=tenancy_settings.store_pool_size
    )
    cache = ScopedDataHandleCache(store_factory)

    if not auth_settings.jwt_secret.get_secret_value():
        probe.jwt_secret_missing()
    validator = JWTValidator(
        secret=auth_settings.jwt_secret.get_secret_value(),
        probe=DefaultJWTValidatorProbe(),
        algorithm=auth_settings.jwt_algorithm,
        issuer=auth_settings.issuer,
        audience=auth_settings.audience,
        tenant_claim=auth_settings.tenant_claim,
        role_claim=auth_settings.role_claim,
    )

    app.state.directory_engine = engine
    app.state.handle_cache = cache
    app.state.jwt_validator = validator
    app.state.tenant_resolver = TenantResolver(
        registry=registry,
        cache=cache,
        verifier=validator,
        header_name=tenancy_settings.header_name,
        query_param=tenancy_settings.query_param,
    )
    app.state.tenant_service = TenantService(
        directory=directory,
        registry=registry,
        cache=cache,
        store_factory=store_factory,
        trial_days=tenancy_settings.trial_days,
    )

    probe.application_started(settings.app_name, __version__)
    try:
        yield
    finally:
        closed = await cache.close_all()
        await engine.dispose()
        probe.application_stopped(closed_stores=closed)


app = FastAPI(
    title="Tenancy API",
    description="Tenant resolution and tenant-scoped data routing",
    version=__version__,
    lifespan=tenancy_lifespan,
)

# Include tenancy bounded context routes
app.include_router(tenancy_routes.router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db(request: Request) -> dict:
    """Check tenant directory database connection health."""
    try:
        async with request.app.state.directory_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

        return {
            "status": "ok",
            "connected": True,
        }
    except Exception as e:
        return {
            "status": "error",
            "connected": False,
            "error": str(e),
        }


@app.get("/health/tenants")
def health_tenants(
    cache: Annotated[ScopedDataHandleCache, Depends(get_handle_cache)],
) -> dict:
    """Report cached tenant data handles."""
    return {
        "status": "ok",
        **cache.stats(),
    }
