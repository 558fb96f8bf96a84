"""Storefront exception hierarchy.

Shared across the route table, navigation, rendering, data endpoint, and
export pipeline so every module raises and catches the same types.

"No route matched" is deliberately absent: resolution returns ``None``.
"""


class StorefrontError(Exception):
    """Base for all storefront-specific errors."""


class ConfigurationError(StorefrontError):
    """Raised when configuration or route registration is invalid.

    Raised at startup, before any page is rendered.
    """


class InvalidPatternError(ConfigurationError):
    """A route pattern cannot be compiled.

    Most commonly a parameter name declared twice in one pattern.
    """

    def __init__(self, pattern: str, detail: str, *, name: str | None = None) -> None:
        self.pattern = pattern
        self.name = name
        super().__init__(f"Invalid route pattern {pattern!r}: {detail}")


class NavigationFault(StorefrontError):
    """An unexpected error while a navigator resolved a URL.

    Never raised past ``push()``/``start()``. The navigator logs it and
    degrades to a no-match resolution; the instance is kept on
    ``Navigator.last_fault`` for inspection.
    """

    def __init__(self, url: str | None, cause: BaseException) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"Navigation to {url!r} failed: {cause}")


class RenderFailure(StorefrontError):
    """A render target could not be loaded or returned a malformed result.

    Exceptions raised *by* the render function itself are not wrapped;
    they propagate unchanged so each caller applies its own policy.
    """


class DataSourceError(StorefrontError):
    """The catalog, the data endpoint, or the data client failed."""


class ExportError(StorefrontError):
    """Fatal failure of a static export run.

    Raised for any error during the load, enumerate, or render phases.
    The original exception is chained as ``__cause__``.
    """
