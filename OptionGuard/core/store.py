from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from .serialization import serialized_size

logger = logging.getLogger(__name__)


@runtime_checkable
class BeforeCreate(Protocol):
    def on_before_create(self, key: str, value: Any, *, autoload: bool = True) -> None:
        ...


@runtime_checkable
class BeforeUpdate(Protocol):
    def on_before_update(self, key: str, value: Any, *, autoload: Optional[bool] = None) -> Any:
        ...


@dataclass
class OptionEntry:
    value: Any
    autoload: bool = True


class OptionStore:
    """In-memory option store that runs registered hooks before each write.

    Hook exceptions propagate and leave the store untouched.
    """

    def __init__(self) -> None:
        self._options: Dict[str, OptionEntry] = {}
        self._hooks: List[object] = []

    def register(self, hook: object) -> None:
        if not isinstance(hook, (BeforeCreate, BeforeUpdate)):
            raise TypeError(f"{type(hook).__name__} implements neither on_before_create nor on_before_update")
        self._hooks.append(hook)

    def unregister(self, hook: object) -> None:
        self._hooks.remove(hook)

    def keys(self) -> List[str]:
        return list(self._options)

    def exists(self, key: str) -> bool:
        return key in self._options

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._options.get(key)
        if entry is None:
            return default
        return entry.value

    def is_autoloaded(self, key: str) -> bool:
        entry = self._options.get(key)
        return bool(entry and entry.autoload)

    def autoload_size(self, exclude: Optional[str] = None) -> int:
        return sum(
            serialized_size(entry.value)
            for key, entry in self._options.items()
            if entry.autoload and key != exclude
        )

    def add(self, key: str, value: Any, autoload: bool = True) -> bool:
        if key in self._options:
            return False
        for hook in self._hooks:
            if isinstance(hook, BeforeCreate):
                hook.on_before_create(key, value, autoload=autoload)
        self._options[key] = OptionEntry(value=value, autoload=autoload)
        logger.info("Added option %s", key)
        return True

    def update(self, key: str, value: Any, autoload: Optional[bool] = None) -> bool:
        for hook in self._hooks:
            if isinstance(hook, BeforeUpdate):
                value = hook.on_before_update(key, value, autoload=autoload)

        entry = self._options.get(key)
        if entry is None:
            return self.add(key, value, autoload=True if autoload is None else autoload)
        if entry.value == value and (autoload is None or autoload == entry.autoload):
            return False

        self._options[key] = OptionEntry(
            value=value,
            autoload=entry.autoload if autoload is None else autoload,
        )
        logger.info("Updated option %s", key)
        return True

    def delete(self, key: str) -> bool:
        if self._options.pop(key, None) is None:
            return False
        logger.info("Deleted option %s", key)
        return True
