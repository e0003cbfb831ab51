"""
Runtime Environment Validation Module

Validates the worker configuration at startup. If validation fails the
process refuses to start (exit code 1) instead of looping on a broken setup.
"""

import sys

from pydantic import ValidationError

from leasing.core.config import Settings, get_settings

SUPPORTED_DRIVERS = ("postgresql", "sqlite")


def validate_environment() -> Settings:
    """
    Validate all required environment variables at startup.

    Returns:
        Settings: Validated settings object

    Raises:
        SystemExit: If validation fails (exit code 1)
    """
    try:
        settings = get_settings()
    except ValidationError as e:
        print("❌ FATAL: Environment validation failed", file=sys.stderr)
        print("\nMissing or invalid environment variables:", file=sys.stderr)
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            print(f"   • {field}: {error['msg']}", file=sys.stderr)
        print("\nPlease check your .env file or environment variables.", file=sys.stderr)
        sys.exit(1)

    problems = collect_problems(settings)
    if problems:
        print("❌ FATAL: Invalid reconciliation configuration", file=sys.stderr)
        for problem in problems:
            print(f"   • {problem}", file=sys.stderr)
        sys.exit(1)

    print("✅ Environment validation passed")
    print(f"   App: {settings.app_name}")
    print(f"   Reconciliation enabled: {settings.reconciliation_enabled}")
    print(f"   Interval: {settings.reconciliation_interval_seconds}s")
    return settings


def collect_problems(settings: Settings) -> list[str]:
    """Return human readable problems with an otherwise parseable configuration."""
    problems = []

    if not settings.database_url.startswith(SUPPORTED_DRIVERS):
        problems.append(
            "DATABASE_URL must be a PostgreSQL (postgresql+asyncpg://) or SQLite (sqlite+aiosqlite://) URL"
        )
    if settings.reconciliation_interval_seconds <= 0:
        problems.append("RECONCILIATION_INTERVAL_SECONDS must be positive")
    if settings.reconciliation_error_backoff_seconds <= 0:
        problems.append("RECONCILIATION_ERROR_BACKOFF_SECONDS must be positive")

    return problems


if __name__ == "__main__":
    validate_environment()
    print("\n✅ All environment variables are valid!")
