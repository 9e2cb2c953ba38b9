"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for the todo app happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. secret_key -> SECRET_KEY). Type coercion and validation are built in.

  @model_validator(mode="after"): Runs cross-field validation after all fields
      are resolved from environment. A missing or short SECRET_KEY is a hard
      startup failure; there is no per-request fallback.

api/main.py reads cors_origins at import time (middleware is fixed before the
app starts) and builds AuthService, TokenCodec and the stores from the same
settings inside the lifespan. No other module calls get_settings().

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
or todos/.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("todoapp.config")

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'todoapp.db'}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    secret_key has no usable default: Settings() raises ValueError unless
    SECRET_KEY is present. Everything else has a default so a local run only
    needs the one variable.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    # Empty string is the sentinel for "not configured"; the validator rejects it.
    secret_key: str = ""
    database_url: str = _DEFAULT_DB_URL

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # bcrypt work factor. 12 is the library's recommended interactive cost.
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173", "http://127.0.0.1:3000"]
    )

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """Refuse to build a Settings object without a usable signing secret.

        Tokens are signed with HMAC-SHA256 over SECRET_KEY. Without it no token
        can be minted or verified, so this is treated as a startup error rather
        than something each request discovers. Keys shorter than 32 characters
        are rejected for lack of entropy.
        """
        if not self.secret_key:
            raise ValueError(
                "SECRET_KEY is required. Set SECRET_KEY in your environment or .env file."
            )
        if len(self.secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    Uses lru_cache so Settings() is instantiated exactly once -- at first call.
    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    settings = Settings()
    logger.debug("Settings loaded (debug=%s, bcrypt_rounds=%d)", settings.debug, settings.bcrypt_rounds)
    return settings
