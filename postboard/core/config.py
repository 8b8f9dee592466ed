from datetime import datetime
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings

from postboard.core.env_manager import EnvManager


class Settings(BaseSettings):
    DATABASE_URL: str = EnvManager.get_env_variable(
        "DATABASE_URL", "sqlite+aiosqlite:///database.db"
    )
    DATABASE_ECHO: bool = EnvManager.get_bool("DATABASE_ECHO", False)

    PROJECT_NAME: str = EnvManager.get_env_variable("PROJECT_NAME", "Post Board")
    PROJECT_INFO: str = EnvManager.get_env_variable(
        "PROJECT_INFO", "Message board API: posts with search, sorting and paging"
    )
    PROJECT_VERSION: str = EnvManager.get_env_variable("PROJECT_VERSION", "1.0.0")
    TIME_ZONE: str = EnvManager.get_env_variable("TIME_ZONE", "Asia/Seoul")
    LOG_LEVEL: str = EnvManager.get_env_variable("LOG_LEVEL", "INFO")

    HOST: str = EnvManager.get_env_variable("HOST", "0.0.0.0")
    PORT: int = int(EnvManager.get_env_variable("PORT", "8000"))

    def get_now(self) -> datetime:
        """Get the current wall-clock time in the configured time zone.

        Stored without tzinfo so values round-trip through SQLite unchanged.
        """
        tz = ZoneInfo(self.TIME_ZONE)
        return datetime.now(tz).replace(tzinfo=None)


settings = Settings()
