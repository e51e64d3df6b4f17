"""Error taxonomy and classifier for the chat relay.

Upstream failures arrive as whatever the gateway client raised. They are
classified by message text into a handful of categories, each with a fixed
explanation that is safe to show in the editor.
"""

from enum import Enum


class ErrorCategory(str, Enum):
    CONNECTIVITY = "connectivity"
    AUTH = "auth"
    TIMEOUT = "timeout"
    QUOTA = "quota"
    UNKNOWN = "unknown"


# Checked in order; the first category with a matching keyword wins.
CATEGORY_KEYWORDS: tuple[tuple[ErrorCategory, tuple[str, ...]], ...] = (
    (
        ErrorCategory.CONNECTIVITY,
        ("fetch", "connection error", "connection refused", "connection reset", "network error"),
    ),
    (ErrorCategory.AUTH, ("auth",)),
    (ErrorCategory.TIMEOUT, ("timeout", "timed out", "aborted", "cancel")),
    (ErrorCategory.QUOTA, ("credits",)),
)

CATEGORY_MESSAGES: dict[ErrorCategory, str] = {
    ErrorCategory.CONNECTIVITY: (
        "Network error: Unable to connect to OpenRouter API. "
        "Please check your internet connection."
    ),
    ErrorCategory.AUTH: "Authentication error: Invalid or missing API key.",
    ErrorCategory.TIMEOUT: (
        "Request timeout: The AI service is taking longer than expected to respond. "
        "This might be due to high demand. Please try again with a simpler request."
    ),
    ErrorCategory.QUOTA: (
        "Insufficient credits: Your OpenRouter account has run out of credits. "
        "Please visit https://openrouter.ai/settings/credits to add more credits."
    ),
}


def classify(error: BaseException) -> ErrorCategory:
    text = str(error).lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return ErrorCategory.UNKNOWN


def describe(error: BaseException, category: ErrorCategory | None = None) -> str:
    category = category or classify(error)
    if category is ErrorCategory.UNKNOWN:
        return f"Failed to process AI request: {str(error) or 'Unknown error'}"
    return CATEGORY_MESSAGES[category]


class RelayError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(RelayError):
    pass


class UpstreamError(RelayError):
    category = ErrorCategory.UNKNOWN


class ConnectivityError(UpstreamError):
    category = ErrorCategory.CONNECTIVITY


class AuthError(UpstreamError):
    category = ErrorCategory.AUTH


class UpstreamTimeoutError(UpstreamError):
    category = ErrorCategory.TIMEOUT


class QuotaError(UpstreamError):
    category = ErrorCategory.QUOTA


class UnknownUpstreamError(UpstreamError):
    category = ErrorCategory.UNKNOWN


_ERROR_TYPES: dict[ErrorCategory, type[UpstreamError]] = {
    ErrorCategory.CONNECTIVITY: ConnectivityError,
    ErrorCategory.AUTH: AuthError,
    ErrorCategory.TIMEOUT: UpstreamTimeoutError,
    ErrorCategory.QUOTA: QuotaError,
    ErrorCategory.UNKNOWN: UnknownUpstreamError,
}


def upstream_error(error: BaseException) -> UpstreamError:
    """Wrap a raw upstream failure in its classified relay error."""
    category = classify(error)
    wrapped = _ERROR_TYPES[category](describe(error, category))
    wrapped.__cause__ = error
    return wrapped
