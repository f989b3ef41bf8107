"""Exception hierarchy for page_theme.

"No candidate found" is never an exception: cascades return ``None``.
Only broken environments, bad inputs and failed injections raise.
"""


class PageThemeError(Exception):
    pass


class DocumentUnavailableError(PageThemeError):
    """The page has no document, or the inspection call was rejected."""


class SnapshotMissError(PageThemeError):
    """A selector was queried that the snapshot never captured."""


class TokenRecordError(PageThemeError):
    pass


class ConfigError(PageThemeError):
    pass


class UnknownThemeVariableError(PageThemeError):
    pass


class InjectionError(PageThemeError):
    pass


class NoLayoutContainerError(InjectionError):
    """No row-direction flex container exists to host the preview panel.

    Callers catch this to fall back to a fixed overlay.
    """


class WidgetNotFoundError(InjectionError):
    pass


class WidgetBundleError(InjectionError):
    pass
