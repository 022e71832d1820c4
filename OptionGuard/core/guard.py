import logging
from typing import Any, List, Optional, Union

from .config import GuardConfig
from .errors import AutoloadLimitExceeded, MissingPriorCreate, OptionUsageError, SizeLimitExceeded
from .models import Operation, Violation
from .serialization import serialized_size

logger = logging.getLogger("optionguard")


class OptionUsageGuard:
    """Size and existence checks run before options are added or updated.

    Register an instance with a store that offers ``get(key, default)``.
    Every violation goes through :meth:`handle_error`, which raises in
    strict mode and logs a warning otherwise.
    """

    def __init__(self, store: Any, config: Optional[GuardConfig] = None):
        self.store = store
        self.config = config or GuardConfig.from_settings()

    # Lifecycle hooks

    def on_before_create(
        self,
        key: str,
        value: Any,
        *,
        autoload: bool = True,
        max_value_size: Optional[int] = None,
        strict: Optional[bool] = None,
    ) -> None:
        for error in self._create_errors(key, value, autoload, max_value_size):
            self.handle_error(error, strict=strict)

    def on_before_update(
        self,
        key: str,
        value: Any,
        *,
        autoload: Optional[bool] = None,
        max_value_size: Optional[int] = None,
        strict: Optional[bool] = None,
    ) -> Any:
        for error in self._update_errors(key, value, autoload, max_value_size):
            self.handle_error(error, strict=strict)
        return value

    # Checks

    def check_size(self, key: str, value: Any, max_value_size: Optional[int] = None) -> Optional[SizeLimitExceeded]:
        limit = self.config.effective_max_value_size(max_value_size)
        size = serialized_size(value)
        if size > limit:
            return SizeLimitExceeded(key, size, limit)
        logger.debug("Option %s is %s bytes (limit %s)", key, size, limit)
        return None

    def check_autoload(self, key: str, value: Any) -> Optional[AutoloadLimitExceeded]:
        limit = self.config.autoload_max_size
        autoload_size = getattr(self.store, "autoload_size", None)
        if limit is None or autoload_size is None:
            return None
        total = autoload_size(exclude=key) + serialized_size(value)
        if total > limit:
            return AutoloadLimitExceeded(key, total, limit)
        return None

    def exists(self, key: str) -> bool:
        native = getattr(self.store, "exists", None)
        if callable(native):
            return bool(native(key))
        sentinel = object()
        return self.store.get(key, sentinel) is not sentinel

    def inspect(
        self,
        key: str,
        value: Any,
        operation: Operation = "create",
        autoload: Optional[bool] = None,
        max_value_size: Optional[int] = None,
    ) -> List[Violation]:
        """Report what a write would violate without raising or logging.

        ``autoload=None`` means the stored flag for updates and autoloaded
        for creates, matching what the store passes to the hooks.
        """
        if operation == "update":
            errors = self._update_errors(key, value, autoload, max_value_size)
        else:
            errors = self._create_errors(key, value, True if autoload is None else autoload, max_value_size)
        return [
            Violation(
                kind=error.kind,
                key=error.key,
                message=error.message,
                size=getattr(error, "size", None),
                limit=getattr(error, "limit", None),
            )
            for error in errors
        ]

    def handle_error(self, error: Union[OptionUsageError, str], *, strict: Optional[bool] = None) -> None:
        if not isinstance(error, OptionUsageError):
            error = OptionUsageError(str(error))
        if self.config.effective_strict_mode(strict):
            raise error
        logger.warning("%s", error.message)

    def _create_errors(self, key, value, autoload, max_value_size):
        # Generators, so strict mode stops at the first violation.
        error = self.check_size(key, value, max_value_size)
        if error:
            yield error
        if autoload:
            error = self.check_autoload(key, value)
            if error:
                yield error

    def _update_errors(self, key, value, autoload, max_value_size):
        error = self.check_size(key, value, max_value_size)
        if error:
            yield error
        exists = self.exists(key)
        if not exists:
            yield MissingPriorCreate(key)
        if autoload is None:
            is_autoloaded = getattr(self.store, "is_autoloaded", None)
            autoload = is_autoloaded(key) if exists and is_autoloaded else True
        if autoload:
            error = self.check_autoload(key, value)
            if error:
                yield error
