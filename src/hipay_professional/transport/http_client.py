"""HTTP transport for HiPay SOAP requests.

One call is one POST: no retries and no backoff. HiPay reports SOAP faults
with HTTP 500 and a parseable body, so 200 and 500 are both handed to the
response parser; any other status is a transport failure.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Optional

import requests

from hipay_professional.utils.exceptions import TransportError
from hipay_professional.utils.version import user_agent

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
DELIVERED_STATUSES = (200, 500)
XML_CONTENT_TYPE = "text/xml;charset=UTF-8"


@dataclass(frozen=True)
class RequestOptions:
    """Options of an HTTP request.
    
    Attributes:
        timeout: Request timeout in seconds
        headers: Extra headers (override the defaults)
        verify: Whether to verify TLS certificates
        proxies: Optional requests proxies mapping
        
    Example:
        >>> defaults = RequestOptions(timeout=10)
        >>> defaults.merge(RequestOptions(timeout=60)).timeout
        60
    """
    
    timeout: float = DEFAULT_TIMEOUT
    headers: Dict[str, str] = field(default_factory=dict)
    verify: bool = True
    proxies: Optional[Dict[str, str]] = None
    
    def __post_init__(self) -> None:
        """Validate timeout."""
        if self.timeout <= 0:
            raise ValueError(
                f"Invalid timeout: {self.timeout}. Must be greater than 0 seconds."
            )
    
    def merge(self, override: Optional["RequestOptions"]) -> "RequestOptions":
        """Overlay per-call options on these defaults.
        
        Headers are merged (override wins), other fields are replaced.
        """
        if override is None:
            return self
        return replace(
            override,
            headers={**self.headers, **override.headers},
            proxies=override.proxies if override.proxies is not None else self.proxies,
        )


def default_headers() -> Dict[str, str]:
    """Headers sent with every SOAP request unless overridden."""
    return {
        "User-Agent": user_agent(),
        "Content-Type": XML_CONTENT_TYPE,
        "Accept": XML_CONTENT_TYPE,
    }


def post_xml(
    url: str,
    body: str,
    options: RequestOptions,
    session: Optional[requests.Session] = None,
) -> requests.Response:
    """POST an XML body and return the response to parse.
    
    Args:
        url: Full operation URL
        body: SOAP envelope
        options: Request options
        session: Optional caller-owned session (plain requests.post otherwise)
        
    Returns:
        Response with status 200 or 500
        
    Raises:
        TransportError: On connection failure, timeout or unexpected status
    """
    headers = {**default_headers(), **options.headers}
    sender = session if session is not None else requests
    
    logger.debug(f"POST {url} (timeout={options.timeout}s)")
    
    try:
        response = sender.post(
            url,
            data=body.encode("utf-8"),
            headers=headers,
            timeout=options.timeout,
            verify=options.verify,
            proxies=options.proxies,
        )
    except requests.RequestException as e:
        logger.error(f"HTTP request to {url} failed: {e}")
        raise TransportError(
            "Error during HTTP requests to Hipay",
            e,
            getattr(e, "response", None),
        ) from e
    
    if response.status_code not in DELIVERED_STATUSES:
        logger.error(f"Unexpected HTTP status {response.status_code} from {url}")
        raise TransportError(
            "Error during HTTP requests to Hipay",
            requests.HTTPError(
                f"Request failed with status code {response.status_code}",
                response=response,
            ),
            response,
        )
    
    if response.status_code == 500:
        logger.warning(f"HTTP 500 from {url}, parsing body as SOAP response")
    
    # The service answers UTF-8; requests guesses ISO-8859-1 for text/xml
    response.encoding = "utf-8"
    return response
