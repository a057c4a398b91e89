"""HiPay environment resolution.

An environment is either ``production``, ``stage`` or an explicit http(s)
base URL (useful for proxies and local test doubles).
"""

from urllib.parse import urlsplit, urlunsplit

from hipay_professional.utils.exceptions import ConfigurationError

PRODUCTION = "production"
STAGE = "stage"

ENDPOINTS = {
    PRODUCTION: "https://ws.hipay.com/",
    STAGE: "https://test-ws.hipay.com/",
}

INVALID_ENV_MESSAGE = 'env must be "production", "stage" or a valid http(s) URL'


def resolve_endpoint(env: str) -> str:
    """Resolve an environment string to the API base URL.
    
    Args:
        env: "production", "stage" or an http(s) URL without query string
        
    Returns:
        Base URL of the HiPay web services (fragment stripped)
        
    Raises:
        ConfigurationError: If env is none of the accepted forms
        
    Example:
        >>> resolve_endpoint("stage")
        'https://test-ws.hipay.com/'
        >>> resolve_endpoint("https://x.com/#frag")
        'https://x.com/'
    """
    if not isinstance(env, str):
        raise ConfigurationError(INVALID_ENV_MESSAGE)
    
    if env in ENDPOINTS:
        return ENDPOINTS[env]
    
    try:
        parts = urlsplit(env)
    except ValueError as e:
        raise ConfigurationError(INVALID_ENV_MESSAGE) from e
    
    # An empty "?" still counts as a query string
    has_query = bool(parts.query) or "?" in env.split("#", 1)[0]
    if parts.scheme not in ("http", "https") or not parts.netloc or has_query:
        raise ConfigurationError(INVALID_ENV_MESSAGE)
    
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", "", ""))


def join_endpoint(endpoint: str, path: str) -> str:
    """Join the base URL and an operation path with exactly one slash.
    
    Example:
        >>> join_endpoint("https://test-ws.hipay.com/", "/soap/refund-v2/card")
        'https://test-ws.hipay.com/soap/refund-v2/card'
    """
    return endpoint.rstrip("/") + "/" + path.lstrip("/")
