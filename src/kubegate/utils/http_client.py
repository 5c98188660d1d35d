import logging
from typing import Optional, Tuple

import httpx

from ..core.config import config

logger = logging.getLogger(__name__)


def get_http_client(
    base_url: str = "",
    auth: Optional[Tuple[str, str]] = None,
    connect_timeout: float = None,
    read_timeout: float = None,
    verify: bool = True,
) -> httpx.Client:
    """
    Returns a configured httpx.Client with:
    - Default timeouts (connect and read).
    - Standard User-Agent and JSON headers.
    """
    c_timeout = connect_timeout if connect_timeout is not None else config.HTTP_TIMEOUT_CONNECT
    r_timeout = read_timeout if read_timeout is not None else config.HTTP_TIMEOUT_READ

    timeout = httpx.Timeout(r_timeout, connect=c_timeout)

    headers = {
        "User-Agent": config.USER_AGENT,
        "Accept": "application/json",
        "Content-Type": "application/json",
    }

    # No retries: a failed platform call is reported as the validator's error.
    return httpx.Client(
        base_url=base_url,
        auth=auth,
        timeout=timeout,
        headers=headers,
        verify=verify,
        follow_redirects=True,
    )
