"""Package version helpers."""

from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION_NAME = "hipay-professional-sdk"
USER_AGENT_PRODUCT = "hipay-professional-sdk-python"


def get_package_version() -> str:
    """Return the installed distribution version, or "?" when not installed."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return "?"


def user_agent() -> str:
    """Return the User-Agent header value sent with every request.
    
    Example:
        >>> user_agent()
        'hipay-professional-sdk-python/1.0.0'
    """
    return f"{USER_AGENT_PRODUCT}/{get_package_version()}"
