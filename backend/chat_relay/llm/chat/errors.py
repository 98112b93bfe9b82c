"""Error taxonomy for the chat and upload relays.

Every error carries a message that is safe to hand back to the client.
The underlying cause, when there is one, is chained with ``raise ... from``
and only ever logged server-side.
"""


class RelayError(Exception):
    """Base exception for relay errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(RelayError):
    """The request is missing a session id or carries no content."""

    status_code = 400


class RelayFailure(RelayError):
    """The upstream provider call failed (network, quota, bad content, no key)."""

    status_code = 500
