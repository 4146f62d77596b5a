"""Exceptions raised by the analysis layer."""


class BatchSizeExceededError(Exception):
    """
    A batch request names more message IDs than the configured ceiling.

    Raised before any email is fetched or any vendor is called.
    """

    def __init__(self, requested: int, limit: int):
        message = f"Batch of {requested} messages exceeds the limit of {limit}"
        super().__init__(message)
        self.message = message
        self.requested = requested
        self.limit = limit
        self.details = {"requested": requested, "limit": limit}
