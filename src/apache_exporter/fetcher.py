"""HTTP fetch of the upstream status page."""

from __future__ import annotations

import logging

import requests
import urllib3

from . import __version__
from .errors import FetchError, StatusError

log = logging.getLogger(__name__)

USER_AGENT = f"apache-exporter/{__version__}"


class StatusFetcher:
    """Fetch the status page with one synchronous GET per call.

    Args:
        uri: Status page URI, usually ``http://host/server-status/?auto``
        insecure: Skip TLS certificate verification
        timeout: Seconds before giving up; ``None`` waits indefinitely
        session: Optional pre-built ``requests.Session``
    """

    def __init__(
        self,
        uri: str,
        *,
        insecure: bool = False,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.uri = uri
        self.insecure = insecure
        self.timeout = timeout or None
        self._session = session if session is not None else requests.Session()

        if insecure:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def fetch(self) -> str:
        """Return the response body.

        Raises:
            FetchError: transport failure, or the body of a 200 could not be read
            StatusError: the upstream answered with a non-200 status
        """
        try:
            resp = self._session.get(
                self.uri,
                headers={"User-Agent": USER_AGENT},
                timeout=self.timeout,
                verify=not self.insecure,
                stream=True,
            )
        except requests.RequestException as e:
            raise FetchError(uri=self.uri, reason=str(e)) from e

        read_error: requests.RequestException | None = None
        body = ""
        try:
            body = resp.text
        except requests.RequestException as e:
            read_error = e
        finally:
            resp.close()

        if resp.status_code != 200:
            detail = str(read_error) if read_error is not None else body
            raise StatusError(
                status_code=int(resp.status_code),
                reason=resp.reason or "",
                detail=detail,
            )

        if read_error is not None:
            raise FetchError(uri=self.uri, reason=str(read_error)) from read_error

        log.debug("fetched status page", extra={"scrape_uri": self.uri})
        return body

    def close(self) -> None:
        self._session.close()
