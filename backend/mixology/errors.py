class MixologyError(Exception):
    """Base error for the service."""


class InvalidInput(MixologyError, ValueError):
    """Raised when a request is missing data the operation requires (e.g. no ingredients)."""


class MalformedCatalogEntry(MixologyError, ValueError):
    """Raised at load time when the bundled catalog violates its contract."""


class ProviderError(MixologyError):
    """A vendor answered, but not with a usable completion."""


class AllProvidersFailed(MixologyError):
    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        detail = "; ".join(self.errors) if self.errors else "no providers configured"
        super().__init__(f"All AI providers failed: {detail}")
