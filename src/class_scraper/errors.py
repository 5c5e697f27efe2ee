"""Error hierarchy for the class scraping and sync pipeline.

Most of these never reach the top level: extractors and the sync batch loop
catch them at their own boundary and log. Only SessionStartupError is meant
to end a run.
"""


class ClassScraperError(Exception):
    """Base exception for all pipeline errors."""

    pass


class ExtractionError(ClassScraperError):
    """A source page could not be rendered or queried."""

    pass


class PageTimeoutError(ExtractionError):
    """Navigation or an element wait exceeded its timeout.

    Raised by the browser adapter in place of the engine's own timeout type.
    """

    pass


class SessionStartupError(ClassScraperError):
    """The shared browser session could not be acquired. Fatal for the run."""

    pass


class SyncError(ClassScraperError):
    """Base for remote store failures."""

    pass


class StoreUnavailableError(SyncError):
    """Connectivity probe failed - the store is unreachable or rejects our key."""

    pass


class StoreRequestError(SyncError):
    """A store request failed, returned a non-success status or an unreadable body."""

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
