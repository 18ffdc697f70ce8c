# oauth2_mongo/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional
import logging
from pathlib import Path

from .oauth.models import TokenCollectionConfig

# Configure logging for settings module
logger = logging.getLogger(__name__)
if not logging.getLogger().hasHandlers():
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s SETTINGS.PY - [%(levelname)s] - %(message)s'
    )

# This settings.py file is at <project root>/oauth2_mongo/settings.py
PROJECT_ROOT = Path(__file__).parent.parent.resolve()
DOTENV_PATH = PROJECT_ROOT / ".env"

if DOTENV_PATH.exists():
    logger.debug(f"SETTINGS.PY: .env file found at: {DOTENV_PATH}")
else:
    logger.debug(
        f"SETTINGS.PY: .env file not found at: {DOTENV_PATH}. "
        "Will rely on OS env vars or defaults."
    )


class Settings(BaseSettings):
    """Token store settings with environment variable support."""

    app_name: str = "oauth2-mongo"
    log_level: str = "INFO"

    # MongoDB connection
    # The database name is taken from the URI path unless mongo_db_name is set
    mongo_uri: str = "mongodb://127.0.0.1:27017/oauth2"
    mongo_db_name: Optional[str] = None
    mongodb_username: Optional[str] = None
    mongodb_password: Optional[str] = Field(
        default=None,
        description="Password for MongoDB authentication. Escaped before being placed in the URL."
    )
    mongo_max_pool_size: int = 50
    mongo_min_pool_size: int = 0
    mongo_connect_timeout_ms: int = 10000
    mongo_server_selection_timeout_ms: int = 10000

    # Collection names
    oauth2_txn_collection: str = "oauth2_txn"
    oauth2_basic_collection: str = "oauth2_basic"
    oauth2_access_collection: str = "oauth2_access"
    oauth2_refresh_collection: str = "oauth2_refresh"

    # Seconds MongoDB waits past expired_at before its TTL monitor may purge a record
    token_ttl_expire_after_seconds: int = Field(default=1, ge=0)

    model_config = SettingsConfigDict(
        env_file=DOTENV_PATH if DOTENV_PATH.exists() else None,
        extra="ignore",
        env_file_encoding='utf-8'
    )

    def token_collection_config(self) -> TokenCollectionConfig:
        """Collection names for the three token record sets (and the unused txn name)."""
        return TokenCollectionConfig(
            txn=self.oauth2_txn_collection,
            basic=self.oauth2_basic_collection,
            access=self.oauth2_access_collection,
            refresh=self.oauth2_refresh_collection,
        )


# Initialize settings instance
settings = Settings()

# Log configuration values for debugging (sensitive values are masked)
logger.debug(
    f"SETTINGS.PY: mongodb_username: "
    f"{'********' if settings.mongodb_username else 'None'}, "
    f"mongodb_password: {'********' if settings.mongodb_password else 'None'}"
)
logger.debug(
    f"SETTINGS.PY: collections: basic='{settings.oauth2_basic_collection}', "
    f"access='{settings.oauth2_access_collection}', "
    f"refresh='{settings.oauth2_refresh_collection}'"
)
