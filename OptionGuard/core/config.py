from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Optional

from pydantic_settings import BaseSettings

# Memcached bucket size; the ceiling for a single cached option.
DEFAULT_MAX_VALUE_SIZE = 2 ** 20


class Settings(BaseSettings):
    APP_NAME: str = "OptionGuard"
    VERSION: str = "0.1.0"

    # Limits
    OPTION_VALUE_MAX_SIZE: int = DEFAULT_MAX_VALUE_SIZE
    # Combined size of autoloaded options; unset disables the check.
    AUTOLOAD_MAX_SIZE: Optional[int] = None

    # Violations raise when strict, otherwise they are logged.
    DEBUG: bool = False
    STRICT_MODE: Optional[bool] = None

    @property
    def STRICT(self) -> bool:
        if self.STRICT_MODE is not None:
            return self.STRICT_MODE
        return self.DEBUG

    # Security
    OPTIONGUARD_API_KEY: str = "change-me-in-prod"

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings():
    return Settings()


@dataclass(frozen=True)
class GuardConfig:
    """Startup defaults for the guard plus optional per-check override hooks.

    ``max_value_size_filter`` and ``strict_mode_filter`` receive the default
    and return the value to use for a single check.
    """

    max_value_size: int = DEFAULT_MAX_VALUE_SIZE
    strict_mode: bool = False
    autoload_max_size: Optional[int] = None
    max_value_size_filter: Optional[Callable[[int], int]] = None
    strict_mode_filter: Optional[Callable[[bool], bool]] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **overrides) -> "GuardConfig":
        settings = settings or get_settings()
        values = {
            "max_value_size": settings.OPTION_VALUE_MAX_SIZE,
            "strict_mode": settings.STRICT,
            "autoload_max_size": settings.AUTOLOAD_MAX_SIZE,
        }
        values.update(overrides)
        return cls(**values)

    def effective_max_value_size(self, override: Optional[int] = None) -> int:
        if override is not None:
            return override
        if self.max_value_size_filter is not None:
            return self.max_value_size_filter(self.max_value_size)
        return self.max_value_size

    def effective_strict_mode(self, override: Optional[bool] = None) -> bool:
        if override is not None:
            return override
        if self.strict_mode_filter is not None:
            return bool(self.strict_mode_filter(self.strict_mode))
        return self.strict_mode
