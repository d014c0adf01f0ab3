"""Remote fetcher: a single buffered HTTP GET per call, no retries."""
import logging
import warnings
from typing import Callable, Optional

import requests
from urllib3.exceptions import InsecureRequestWarning

from fv_patcher import __version__
from fv_patcher.core.config import PatcherConfig
from fv_patcher.core.errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
USER_AGENT = f"fv-patcher/{__version__}"

Fetcher = Callable[[str], bytes]


def fetch_url(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    verify_tls: bool = False,
    session: Optional[requests.Session] = None,
) -> bytes:
    """Fetch ``url`` and return the full response body.

    TLS peer verification is off unless ``verify_tls`` is set; the filelist
    hosts have historically served certificates clients could not validate.

    Args:
        url: Absolute URL to GET
        timeout: Seconds before the request is abandoned
        verify_tls: Verify the server certificate
        session: Optional session to reuse connections across calls

    Returns:
        Response body bytes

    Raises:
        TransportError: On connection, TLS, timeout or non-2xx status
    """
    http = session or requests
    try:
        with warnings.catch_warnings():
            if not verify_tls:
                warnings.simplefilter("ignore", InsecureRequestWarning)
            response = http.get(
                url,
                timeout=timeout,
                verify=verify_tls,
                headers={"User-Agent": USER_AGENT},
            )
    except requests.RequestException as e:
        raise TransportError(f"GET {url} failed: {e}", url=url) from e

    if not response.ok:
        raise TransportError(
            f"GET {url} returned HTTP {response.status_code}",
            url=url,
            status_code=response.status_code,
        )

    logger.debug(f"Fetched {len(response.content)} bytes from {url}")
    return response.content


class SessionFetcher:
    """Fetcher bound to one ``requests.Session`` and the run's transport policy.

    Use as a context manager so the session is closed when the run ends.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, verify_tls: bool = False):
        self.timeout = timeout
        self.verify_tls = verify_tls
        self.session = requests.Session()

    def __call__(self, url: str) -> bytes:
        return fetch_url(
            url,
            timeout=self.timeout,
            verify_tls=self.verify_tls,
            session=self.session,
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "SessionFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def make_fetcher(config: PatcherConfig) -> SessionFetcher:
    """Bind timeout and TLS policy from ``config`` to one session for the run."""
    return SessionFetcher(timeout=config.timeout, verify_tls=config.verify_tls)
