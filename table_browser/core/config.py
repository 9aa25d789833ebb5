from pydantic_settings import BaseSettings
from functools import lru_cache
from dotenv import load_dotenv
import os

# Explicitly load .env from project root if not loaded
base_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
env_path = os.path.join(base_dir, ".env")
if os.path.exists(env_path):
    load_dotenv(env_path, override=True)
else:
    load_dotenv()

class Settings(BaseSettings):
    """
    Table Browser global settings

    Priority: environment variables > .env file > defaults
    """

    # ===========================================
    # Project
    # ===========================================
    PROJECT_NAME: str = "Table Browser Backend"   # Used as the API docs title
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"                   # API version prefix

    # ===========================================
    # Server
    # ===========================================
    SERVER_HOST: str = "0.0.0.0"            # 0.0.0.0 listens on every interface
    SERVER_PORT: int = 8000

    # ===========================================
    # MySQL (the browsed store)
    # MYSQL_DB is only the initial database of each connection, every
    # request names its own schema explicitly
    # ===========================================
    MYSQL_HOST: str = "localhost"
    MYSQL_PORT: int = 3306
    MYSQL_USER: str = "root"
    MYSQL_PASSWORD: str = ""
    MYSQL_DB: str = "information_schema"

    # Connection pool
    DB_POOL_SIZE: int = 5                   # Pool size
    DB_MAX_OVERFLOW: int = 10               # Connections allowed beyond pool size
    DB_POOL_RECYCLE: int = 3600             # Seconds, avoids MySQL's 8 hour disconnect

    # ===========================================
    # Content paging
    # ===========================================
    CONTENT_DEFAULT_LIMIT: int = 25
    CONTENT_MAX_LIMIT: int = 1000

    # ===========================================
    # Debug mode
    # ===========================================
    # Store errors are returned verbatim in both modes, debug only raises
    # the log level and enables the access log
    DEBUG_MODE: bool = False

    class Config:
        # Rely on load_dotenv above rather than pydantic's env_file
        env_file = None
        case_sensitive = True

@lru_cache()
def get_settings():
    return Settings()
