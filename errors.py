"""
errors.py - What can go wrong on the way in

TransportFailure and ExtractionFailure never leave a source adapter: they are
turned into a degraded (empty) result there. PersistenceFailure is logged by
the snapshot store and never undoes an in-memory swap.
"""


class LotteryError(Exception):
    """Base class for every failure raised by this service."""


class TransportFailure(LotteryError):
    """The upstream page could not be fetched (network error, timeout, HTTP status)."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Fetch failed for {url}: {reason}")


class ExtractionFailure(LotteryError):
    """The fetched page had none of the structures we know how to read."""


class PersistenceFailure(LotteryError):
    """The durable blob store rejected a read or write."""
