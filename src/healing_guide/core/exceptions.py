"""Exception hierarchy for healing-guide."""


class HealingGuideError(Exception):
    """Base exception for the package."""


class ConfigurationError(HealingGuideError):
    """Invalid or unreadable configuration."""


class ProviderError(HealingGuideError):
    """Failure talking to the generative provider.

    `retryable` tells the retry scheduler whether another attempt may help.
    """

    retryable = True


class ProviderConfigError(ProviderError):
    """No usable provider credential. Never retried."""

    retryable = False


class ProviderTimeoutError(ProviderError):
    """The provider did not answer within the per-attempt deadline."""


class ProviderHTTPError(ProviderError):
    """The provider answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProviderResponseError(ProviderError):
    """The provider answer did not have the expected shape."""


# Name used by callers that think in terms of the decoded payload.
ResponseShapeError = ProviderResponseError


class PersistenceError(HealingGuideError):
    """A cache or search-cache write failed."""
