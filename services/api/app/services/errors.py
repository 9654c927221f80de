"""Errors raised by the deal pipeline and its clients."""


class DealPipelineError(ValueError):
    """A seed record cannot be turned into a trustworthy offer.

    Raised for an original price <= 0, a non-finite price, or a malformed
    catalog. Fatal for the whole snapshot request.
    """

    def __init__(self, message: str, *, deal_id: str | None = None):
        super().__init__(message)
        self.deal_id = deal_id


class RefreshError(RuntimeError):
    """The deals endpoint could not be reached or returned an unusable payload."""

    USER_MESSAGE = "Could not refresh the deals. Try again."

    def __init__(self, reason: str):
        super().__init__(self.USER_MESSAGE)
        self.reason = reason
