"""
Runtime Environment Validation Module

Validates the environment at application startup. If validation fails,
the application refuses to start (hard fail) instead of surfacing
configuration problems as failed fetches later on.
"""

import sys
from typing import Optional

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProductionSettings(BaseSettings):
    """
    Strict validation schema for production environment variables.

    All required fields MUST be present and valid, or the application will not start.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================================================
    # CRITICAL: Supabase Authentication
    # ========================================================================
    supabase_jwt_secret: str  # REQUIRED: HS256 secret used to verify access tokens

    # ========================================================================
    # CRITICAL: Rental data source
    # ========================================================================
    data_source: str = "database"  # "database" or "supabase"
    database_url: Optional[str] = None
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None

    # ========================================================================
    # Application Configuration
    # ========================================================================
    app_name: str = "Nyumba Rentals"
    debug: bool = False

    # ========================================================================
    # CRITICAL: CORS Configuration
    # ========================================================================
    allowed_origins: str  # REQUIRED: Comma-separated list of allowed origins


def _fail(message: str) -> None:
    print(f"FATAL: {message}", file=sys.stderr)
    sys.exit(1)


def validate_environment() -> ProductionSettings:
    """
    Validate all required environment variables at startup.

    Returns:
        ProductionSettings: Validated settings object

    Raises:
        SystemExit: If validation fails (exit code 1)
    """
    try:
        settings = ProductionSettings()
    except ValidationError as e:
        print("FATAL: Environment validation failed", file=sys.stderr)
        print("\nMissing or invalid environment variables:", file=sys.stderr)
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            print(f"   - {field}: {error['msg']}", file=sys.stderr)
        print("\nPlease check your .env file or environment variables.", file=sys.stderr)
        sys.exit(1)

    # 1. CORS: wildcard is only acceptable in debug mode
    if not settings.debug:
        origins = [o.strip() for o in settings.allowed_origins.split(",")]
        if "*" in origins:
            _fail("Wildcard CORS origin (*) detected in production mode. "
                  "Set ALLOWED_ORIGINS to specific domains (comma-separated).")

    # 2. Data source: validate source-specific configuration
    if settings.data_source == "database":
        if not settings.database_url or not settings.database_url.startswith("postgresql"):
            _fail("DATABASE_URL must be a PostgreSQL connection string "
                  "(postgresql:// or postgresql+asyncpg://) when DATA_SOURCE=database")
    elif settings.data_source == "supabase":
        if not settings.supabase_url or not settings.supabase_anon_key:
            _fail("SUPABASE_URL and SUPABASE_ANON_KEY required when DATA_SOURCE=supabase")
    else:
        _fail(f"Invalid DATA_SOURCE '{settings.data_source}'. Must be 'database' or 'supabase'.")

    print("Environment validation passed")
    print(f"   App: {settings.app_name}")
    print(f"   Debug: {settings.debug}")
    print(f"   Data source: {settings.data_source}")
    print(f"   CORS Origins: {settings.allowed_origins}")

    return settings


if __name__ == "__main__":
    validate_environment()
    print("\nAll environment variables are valid!")
