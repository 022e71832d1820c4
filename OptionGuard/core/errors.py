class OptionUsageError(Exception):
    """Raised for option usage violations when the guard runs in strict mode."""

    kind = "option_usage"

    def __init__(self, message: str, key: str = ""):
        super().__init__(message)
        self.message = message
        self.key = key


class SizeLimitExceeded(OptionUsageError):
    kind = "size_limit_exceeded"

    def __init__(self, key: str, size: int, limit: int):
        super().__init__(
            f"Attempted to set option '{key}' which is too big ({size} bytes). "
            f"There is a {limit} byte limit.",
            key=key,
        )
        self.size = size
        self.limit = limit


class MissingPriorCreate(OptionUsageError):
    kind = "missing_prior_create"

    def __init__(self, key: str):
        super().__init__(
            f"Option '{key}' does not exist. You must add it before you can update it.",
            key=key,
        )


class AutoloadLimitExceeded(OptionUsageError):
    kind = "autoload_limit_exceeded"

    def __init__(self, key: str, size: int, limit: int):
        super().__init__(
            f"Setting autoloaded option '{key}' would grow autoloaded options to {size} bytes. "
            f"There is a {limit} byte limit.",
            key=key,
        )
        self.size = size
        self.limit = limit
