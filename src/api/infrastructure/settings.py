"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Tenant directory database connection settings.

    Environment variables:
        TENANCY_DB_HOST: Database host (default: localhost)
        TENANCY_DB_PORT: Database port (default: 5432)
        TENANCY_DB_DATABASE: Directory database name (default: tenancy)
        TENANCY_DB_USERNAME: Database user (default: tenancy)
        TENANCY_DB_PASSWORD: Database password (required in production)
        TENANCY_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        TENANCY_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANCY_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="tenancy", description="Directory database name")
    username: str = Field(default="tenancy", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class AuthSettings(BaseSettings):
    """Bearer credential verification settings.

    Environment variables:
        TENANCY_AUTH_JWT_SECRET: Shared HMAC secret used to sign tokens
        TENANCY_AUTH_JWT_ALGORITHM: Signing algorithm (default: HS256)
        TENANCY_AUTH_ISSUER: Expected issuer, verified only when set
        TENANCY_AUTH_AUDIENCE: Expected audience, verified only when set
        TENANCY_AUTH_TENANT_CLAIM: Claim carrying the tenant identifier (default: tenantId)
        TENANCY_AUTH_ROLE_CLAIM: Claim carrying the caller role (default: role)
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANCY_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jwt_secret: SecretStr = Field(
        default=SecretStr(""),
        description="Shared secret for HMAC-signed bearer tokens",
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    issuer: str | None = Field(default=None, description="Expected issuer claim")
    audience: str | None = Field(default=None, description="Expected audience claim")
    tenant_claim: str = Field(
        default="tenantId",
        description="Claim carrying the tenant identifier",
    )
    role_claim: str = Field(default="role", description="Claim carrying the role")


class TenancySettings(BaseSettings):
    """Tenant resolution and per-tenant store settings.

    Environment variables:
        TENANCY_HEADER_NAME: Request header naming the tenant (default: X-Tenant-ID)
        TENANCY_QUERY_PARAM: Query parameter naming the tenant (default: tenant)
        TENANCY_TRIAL_DAYS: Length of the trial period for new tenants (default: 14)
        TENANCY_BASE_DOMAIN: Domain used to build tenant access URLs
        TENANCY_STORE_POOL_SIZE: Connection pool size per tenant store (default: 5)
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    header_name: str = Field(default="X-Tenant-ID", description="Tenant header")
    query_param: str = Field(default="tenant", description="Tenant query parameter")
    trial_days: int = Field(default=14, ge=0, description="Trial length in days")
    base_domain: str = Field(
        default="localhost:5173",
        description="Domain used to build tenant access URLs",
    )
    store_pool_size: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Connection pool size per tenant store",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Tenancy API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def auth(self) -> AuthSettings:
        """Get auth settings."""
        return get_auth_settings()

    @property
    def tenancy(self) -> TenancySettings:
        """Get tenancy settings."""
        return get_tenancy_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_auth_settings() -> AuthSettings:
    """Get cached auth settings."""
    return AuthSettings()


@lru_cache
def get_tenancy_settings() -> TenancySettings:
    """Get cached tenancy settings."""
    return TenancySettings()
