"""
HTTP fetch client for the external sources.

The client performs exactly one GET per call and classifies the response;
retries and backoff are left to the caller.
"""

import logging
from typing import Optional, Sequence, Union

import requests

from . import config
from .models import FetchOutcome, FetchStatus
from .sources import Source

logger = logging.getLogger(__name__)


def classify_status(status_code: int) -> FetchStatus:
    """Map an HTTP status code to a fetch status."""
    if status_code == 200:
        return FetchStatus.SUCCESS
    if status_code == 202:
        # BGG queues expensive requests and asks the client to come back later
        return FetchStatus.RATE_LIMITED
    if status_code == 404:
        return FetchStatus.NOT_FOUND
    if status_code in (429, 503):
        return FetchStatus.RATE_LIMITED
    if 500 <= status_code < 600:
        return FetchStatus.SERVER_FAULT
    if 400 <= status_code < 500:
        return FetchStatus.CLIENT_FAULT
    return FetchStatus.TRANSPORT_FAULT


class FetchClient:
    """
    Fetches raw markup from one external source.
    """

    def __init__(self, source: Source, session: Optional[requests.Session] = None,
                 timeout: float = config.REQUEST_TIMEOUT):
        """
        Initialize the fetch client.

        Args:
            source: Source descriptor providing the URL template
            session: Optional shared session (one is created otherwise)
            timeout: Request timeout in seconds
        """
        self.source = source
        self.timeout = timeout

        # Set up session for better performance
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': config.USER_AGENT})

    def fetch(self, identifiers: Union[int, Sequence[int]]) -> FetchOutcome:
        """
        Issue a single GET for one identifier or, on batch-capable sources, several.

        Args:
            identifiers: An identifier or a sequence of identifiers

        Returns:
            FetchOutcome describing the body or the failure class
        """
        if isinstance(identifiers, int):
            identifiers = [identifiers]
        url = self.source.build_url(list(identifiers))

        try:
            logger.info(f"Fetching {self.source.label} data from {url}")
            response = self.session.get(url, headers={'Accept': self.source.accept}, timeout=self.timeout)
        except requests.Timeout:
            logger.warning(f"Timed out after {self.timeout}s fetching {url}")
            return FetchOutcome.failure(FetchStatus.TRANSPORT_FAULT, f"Request timed out after {self.timeout}s", url=url)
        except requests.RequestException as e:
            logger.error(f"Transport error fetching {url}: {e}")
            return FetchOutcome.failure(FetchStatus.TRANSPORT_FAULT, f"Transport error: {e}", url=url)

        status = classify_status(response.status_code)
        if status is FetchStatus.SUCCESS:
            body = response.content if self.source.binary_body else response.text
            return FetchOutcome.success(body, url=url)

        detail = f"{self.source.label} answered HTTP {response.status_code}"
        if status is FetchStatus.RATE_LIMITED:
            logger.warning(f"{self.source.label} is throttling requests ({response.status_code})")
        else:
            logger.error(f"{detail} for {url}")
        return FetchOutcome.failure(status, detail, status_code=response.status_code, url=url)
