"""
Centralised configuration for the API Explorer.

All tunables are read from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass

# ── History ────────────────────────────────────────────────────────
DEFAULT_HISTORY_LIMIT = 50
HISTORY_BACKENDS = ("memory", "sql")

# ── Storage ────────────────────────────────────────────────────────
DEFAULT_DATABASE_URL = "sqlite:///./api_explorer.db"

# ── Dispatch ───────────────────────────────────────────────────────
DEFAULT_DISPATCH_TIMEOUT = 30.0   # seconds per outbound request

# ── Logging ────────────────────────────────────────────────────────
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    """Runtime settings resolved from the environment."""
    history_limit: int = DEFAULT_HISTORY_LIMIT
    history_backend: str = "memory"
    database_url: str = DEFAULT_DATABASE_URL
    dispatch_timeout: float = DEFAULT_DISPATCH_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL
    cors_origins: tuple[str, ...] = ("*",)


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """
    Build a Settings instance from environment variables.

    Args:
        environ: Mapping to read from; defaults to os.environ

    Returns:
        The resolved Settings

    Raises:
        ValueError: If a variable holds a value that cannot be used
    """
    env = os.environ if environ is None else environ

    history_limit = int(env.get("API_EXPLORER_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT))
    if history_limit < 1:
        raise ValueError(f"History limit must be positive, got {history_limit}")

    history_backend = env.get("API_EXPLORER_HISTORY_BACKEND", "memory").lower()
    if history_backend not in HISTORY_BACKENDS:
        raise ValueError(
            f"Invalid history backend: {history_backend}. "
            f"Allowed values are: {', '.join(HISTORY_BACKENDS)}"
        )

    dispatch_timeout = float(env.get("API_EXPLORER_DISPATCH_TIMEOUT", DEFAULT_DISPATCH_TIMEOUT))
    if dispatch_timeout <= 0:
        raise ValueError(f"Dispatch timeout must be positive, got {dispatch_timeout}")

    origins = env.get("API_EXPLORER_CORS_ORIGINS", "*")
    cors_origins = tuple(o.strip() for o in origins.split(",") if o.strip()) or ("*",)

    return Settings(
        history_limit=history_limit,
        history_backend=history_backend,
        database_url=env.get("API_EXPLORER_DATABASE_URL", DEFAULT_DATABASE_URL),
        dispatch_timeout=dispatch_timeout,
        log_level=env.get("API_EXPLORER_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        cors_origins=cors_origins,
    )
