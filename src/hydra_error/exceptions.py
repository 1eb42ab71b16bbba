"""Exceptions raised by the plugin itself.

These cover startup problems only. Errors raised by request handlers are not
errors of this package; they are the input the rewriter formats.
"""


class PluginError(Exception):
    """Base class for all plugin exceptions."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class PluginRegistrationError(PluginError):
    """Raised when the plugin cannot be registered on an application.

    ``errors`` holds one ``(location, message)`` pair per failing option,
    e.g. ``("context.path", "String should have at least 1 character")``.
    """

    def __init__(self, message: str, errors: list[tuple[str, str]] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class PluginNotRegisteredError(PluginError):
    """Raised when options are requested from an app the plugin was never registered on."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"plugin {name!r} is not registered on this application")
