"""Exceptions raised by email data providers."""


class UpstreamFetchError(Exception):
    """
    The email data provider failed to return a message or thread.

    ``not_found`` distinguishes a missing message from an unreachable source.
    """

    def __init__(
        self,
        message: str,
        resource_id: str | None = None,
        not_found: bool = False,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.resource_id = resource_id
        self.not_found = not_found
        self.details = details or {}
        if resource_id:
            self.details.setdefault("resource_id", resource_id)
