"""Exceptions raised by the feed stages."""


class FeedError(Exception):
    """Base class for feed fetch/decode problems."""


class FeedDecodeError(FeedError):
    """A feed body is not a `token(<json>);` envelope or its JSON is malformed."""


class UnrecoverableFetchError(FeedError):
    """No innings feed of a match produced any data."""

    def __init__(self, match_id: str, failures: list[str] | None = None):
        self.match_id = match_id
        self.failures = failures or []
        super().__init__(f"Failed to fetch any valid data for match {match_id}")
