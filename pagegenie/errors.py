"""Error taxonomy shared by the pipeline, the search layer and the API."""
from __future__ import annotations

from pagegenie.models.outputs import ParseFailure


class PageGenieError(Exception):
    """Base class for errors surfaced to API callers."""

    code: str = "server_error"


class ValidationFailure(PageGenieError):
    """Missing or malformed input, detected before any network call."""

    code = "bad_request"


class UpstreamCallFailure(PageGenieError):
    """A single collaborator call (model, search, page fetch) failed."""

    code = "upstream_error"

    def __init__(self, service: str, message: str):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.message = message


class ParseFailureError(PageGenieError):
    """Model output could not be turned into the expected structured value."""

    code = "parse_error"

    def __init__(self, failure: ParseFailure):
        super().__init__(failure.reason)
        self.failure = failure
