from __future__ import annotations

from dataclasses import dataclass


class ScrapeError(Exception):
    """A failure that aborts one collection cycle.

    The collector counts these and keeps serving; anything else propagates.
    """

    kind = "scrape_error"


@dataclass(eq=False)
class FetchError(ScrapeError):
    """The upstream status page could not be reached or read."""

    uri: str
    reason: str

    kind = "fetch_error"

    def __str__(self) -> str:
        return f"error scraping apache: {self.reason}"


@dataclass(eq=False)
class StatusError(ScrapeError):
    """The upstream answered with something other than 200."""

    status_code: int
    reason: str
    detail: str

    kind = "status_error"

    def __str__(self) -> str:
        return f"status {self.status_code} {self.reason}: {self.detail}"


@dataclass(eq=False)
class ParseError(ScrapeError):
    """A recognized field holds a value that is not a float."""

    key: str
    value: str

    kind = "parse_error"

    def __str__(self) -> str:
        return f"invalid value for {self.key!r}: {self.value!r}"
