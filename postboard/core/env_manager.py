import os
from typing import Optional

from dotenv import load_dotenv


class EnvManager:
    """Read settings from the environment, loading a .env file on first use."""

    _loaded: bool = False

    @classmethod
    def load(cls, path: Optional[str] = None) -> None:
        if not cls._loaded:
            load_dotenv(path)
            cls._loaded = True

    @classmethod
    def get_env_variable(cls, name: str, default: str = "") -> str:
        cls.load()
        return os.getenv(name, default)

    @classmethod
    def get_bool(cls, name: str, default: bool = False) -> bool:
        value = cls.get_env_variable(name, str(default))
        return value.strip().lower() in {"1", "true", "yes", "on"}
