"""Error taxonomy for grok-search.

Every error is terminal for the current invocation; the CLI turns any of them into exit status 1.
"""

from __future__ import annotations


class GrokSearchError(RuntimeError):
    """Base class for all grok-search errors."""


class ConfigurationError(GrokSearchError):
    """A required setting (the xAI API key) is missing."""


class RequestError(GrokSearchError):
    """The call to the xAI service failed."""


class UsageError(GrokSearchError):
    """The command line was invoked without a query."""


class InstallError(GrokSearchError):
    """A skill installation step failed."""


MISSING_API_KEY_MESSAGE = (
    "XAI_API_KEY environment variable is not set. "
    'Set it with: export XAI_API_KEY="your-api-key"'
)
