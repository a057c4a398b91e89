"""Audit trail of HiPay SOAP exchanges.

Every request/response pair is logged: a one-line summary at INFO level and
the complete bodies at DEBUG level. Credentials are always masked in the
bodies, whatever the formatter configuration.
"""

import uuid
from typing import Optional

from .formatters import redact_credentials
from .logger import get_logger

logger = get_logger("hipay_professional.audit")


def log_transaction(
    operation: str,
    endpoint: str,
    request: str,
    response: Optional[str],
    status: str = "success",
    error_message: Optional[str] = None,
) -> str:
    """Log a complete SOAP exchange.
    
    Args:
        operation: SOAP operation (generate, confirm, cancel, card)
        endpoint: Operation URL
        request: Full request envelope
        response: Full response body, None when no response was received
        status: "success", "error" (business error) or "failure"
        error_message: Error details, if any
        
    Returns:
        Correlation id shared by the log records of this exchange
        
    Example:
        >>> log_transaction("confirm", url, request_xml, response_xml, "success")
    """
    correlation_id = str(uuid.uuid4())
    response_size = len(response) if response is not None else 0
    
    summary = (
        f"TRANSACTION [{operation}] | "
        f"status={status} | "
        f"endpoint={endpoint} | "
        f"correlation_id={correlation_id} | "
        f"request_size={len(request)} bytes | "
        f"response_size={response_size} bytes"
    )
    if error_message:
        summary += f" | error_message={error_message}"
    
    if status == "failure":
        logger.error(summary)
    else:
        logger.info(summary)
    
    logger.debug(
        f"TRANSACTION REQUEST [{operation}] | correlation_id={correlation_id}\n"
        f"{redact_credentials(request)}"
    )
    if response is not None:
        logger.debug(
            f"TRANSACTION RESPONSE [{operation}] | correlation_id={correlation_id}\n"
            f"{response}"
        )
    
    return correlation_id
