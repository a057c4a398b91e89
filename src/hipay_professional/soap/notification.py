"""Server-to-server notification decoding and integrity verification.

HiPay POSTs notifications as an ``application/x-www-form-urlencoded`` body
whose ``xml`` field holds::

    <mapi>
      <mapiversion>1.0</mapiversion>
      <md5content>c0783cc613bf025087b8fb5b4d2d5a84</md5content>
      <result>
        <operation>capture</operation>
        ...
        <merchantDatas><_aKey_sessionId>123</_aKey_sessionId></merchantDatas>
      </result>
    </mapi>

``md5content`` is an MD5 digest of the raw ``<result ...>...</result>`` text,
either alone (legacy) or followed by the API password (signature). MD5 is
imposed by the remote protocol; it is not collision resistant, so the check
proves origin only as far as the password stays secret.
"""

import hashlib
import hmac
import logging
import re
from enum import Enum
from typing import Dict, List, Optional, Tuple
from urllib.parse import parse_qs

from lxml import etree

from hipay_professional.models.responses import (
    NotificationResponse,
    OrderNotificationResult,
)
from hipay_professional.models.wire import from_wire
from hipay_professional.soap.parsers import child_elements, find_child, parse_xml, qualified_name
from hipay_professional.utils.exceptions import (
    BadDigestError,
    BadSignatureError,
    IncompleteNotificationError,
    InvalidDigestError,
    NotificationDecodeError,
)

logger = logging.getLogger(__name__)

DIGEST_PATTERN = re.compile(r"[0-9a-fA-F]{32}")
MERCHANT_DATA_FIELD = "merchantDatas"
MERCHANT_DATA_PREFIX = "_aKey_"
NOTIFICATION_FORM_FIELD = "xml"

RESULT_START = re.compile(r"<result(\s|>)")
RESULT_END = "</result>"


class DigestScheme(Enum):
    """Ways HiPay computes md5content."""
    
    DIGEST_ONLY = "digest"
    SIGNATURE = "signature"


def verification_plan(check_digest: bool, check_signature: bool) -> Tuple[DigestScheme, ...]:
    """Return the schemes to try, in order.
    
    ============== =============== ============================
    check_digest   check_signature schemes
    ============== =============== ============================
    any            True            SIGNATURE
    True           False           DIGEST_ONLY, then SIGNATURE
    False          False           (no verification)
    ============== =============== ============================
    
    The fallback accepts both conventions HiPay used over time.
    """
    if check_signature:
        return (DigestScheme.SIGNATURE,)
    if check_digest:
        return (DigestScheme.DIGEST_ONLY, DigestScheme.SIGNATURE)
    return ()


def _text(element: Optional[etree._Element]) -> Optional[str]:
    """Return the text of a leaf element, None if absent or not a leaf."""
    if element is None or any(True for _ in child_elements(element)):
        return None
    return element.text


def decode_digest(md5content: str) -> bytes:
    """Decode the hex digest, which must be exactly 16 bytes.
    
    Raises:
        InvalidDigestError: If the value is not hex or has the wrong length
    """
    value = md5content.strip()
    if not DIGEST_PATTERN.fullmatch(value):
        raise InvalidDigestError("md5content digest is invalid")
    return bytes.fromhex(value)


def result_fragment(xml_str: str) -> bytes:
    """Return the raw ``<result ...>...</result>`` bytes of the notification.
    
    The digest covers the exact text sent by HiPay, so it is sliced from the
    original string rather than re-serialized.
    
    Raises:
        IncompleteNotificationError: If either tag cannot be located
    """
    start = RESULT_START.search(xml_str)
    if start is None:
        raise IncompleteNotificationError("Unable to find result begin")
    end = xml_str.rfind(RESULT_END)
    if end == -1 or end < start.start():
        raise IncompleteNotificationError("Unable to find result end")
    return xml_str[start.start():end + len(RESULT_END)].encode("utf-8")


def compute_digest(fragment: bytes, scheme: DigestScheme, password: str) -> bytes:
    """Compute md5content for a scheme."""
    digest = hashlib.md5(fragment)
    if scheme is DigestScheme.SIGNATURE:
        digest.update(password.encode("utf-8"))
    return digest.digest()


def _mismatch(received: bytes, fragment: bytes, scheme: DigestScheme, password: str) -> Optional[str]:
    """Return a mismatch description, or None when the digest matches."""
    expected = compute_digest(fragment, scheme, password)
    if hmac.compare_digest(received, expected):
        return None
    return f"{received.hex()}(current) != {expected.hex()}(expected)"


def verify_digest(
    xml_str: str,
    md5content: str,
    password: str,
    check_digest: bool = True,
    check_signature: bool = False,
) -> Optional[DigestScheme]:
    """Verify md5content against the raw result fragment.
    
    Args:
        xml_str: Raw notification XML
        md5content: Hex digest found in the notification
        password: API password (signing secret)
        check_digest: Accept the legacy digest, falling back to the signature
        check_signature: Accept the signature only
        
    Returns:
        The scheme that matched, None when verification is disabled
        
    Raises:
        InvalidDigestError: If md5content is not a 16 bytes hex value
        BadSignatureError: If check_signature is set and the signature differs
        BadDigestError: If neither scheme matches in digest mode
    """
    plan = verification_plan(check_digest, check_signature)
    if not plan:
        logger.warning("Notification digest verification is DISABLED")
        return None
    
    received = decode_digest(md5content)
    fragment = result_fragment(xml_str)
    
    reasons: List[str] = []
    for scheme in plan:
        reason = _mismatch(received, fragment, scheme, password)
        if reason is None:
            logger.debug(f"Notification digest verified with {scheme.value} scheme")
            return scheme
        reasons.append(reason)
    
    if check_signature:
        raise BadSignatureError(f"Bad signature: {reasons[0]}")
    raise BadDigestError(f"Bad digest: {', '.join(reasons)}")


def flatten_result(result: etree._Element) -> Dict[str, object]:
    """Flatten the notification result element.
    
    Leaf children map to their text. ``merchantDatas`` becomes a nested map
    of its ``_aKey_``-prefixed children, prefix stripped. Other children
    without text are skipped.
    """
    data: Dict[str, object] = {}
    for child in child_elements(result):
        name = qualified_name(child)
        if name == MERCHANT_DATA_FIELD:
            data[name] = {
                qualified_name(entry)[len(MERCHANT_DATA_PREFIX):]: entry.text
                for entry in child_elements(child)
                if qualified_name(entry).startswith(MERCHANT_DATA_PREFIX)
            }
        else:
            text = _text(child)
            if text is not None:
                data[name] = text
    return data


def parse_notification(
    xml_str: str,
    password: str,
    check_digest: bool = True,
    check_signature: bool = False,
) -> NotificationResponse:
    """Decode a notification and verify its integrity.
    
    Args:
        xml_str: Value of the ``xml`` form field
        password: API password (signing secret)
        check_digest: Verify md5content, accepting legacy digest or signature (default)
        check_signature: Verify md5content as a signature only
        
    Returns:
        NotificationResponse with the typed result
        
    Raises:
        NotificationDecodeError: If the XML is not well-formed
        IncompleteNotificationError: If mapiversion, md5content or result is missing
        InvalidDigestError: If md5content is not a 16 bytes hex value
        BadSignatureError: If the signature does not match
        BadDigestError: If neither the digest nor the signature matches
        
    Example:
        >>> notification = parse_notification(form["xml"], password)
        >>> if notification.result.status == NotificationStatus.OK:
        ...     capture(notification.result.transid)
    """
    if not xml_str or not xml_str.strip():
        raise IncompleteNotificationError("Incomplete XML content")
    
    try:
        root = parse_xml(xml_str)
    except etree.XMLSyntaxError as e:
        logger.warning(f"Rejected notification: {e}")
        raise NotificationDecodeError("Can't decode XML content") from e
    
    mapiversion = _text(find_child(root, "mapiversion"))
    md5content = _text(find_child(root, "md5content"))
    result = find_child(root, "result")
    if qualified_name(root) != "mapi" or mapiversion is None or md5content is None or result is None:
        raise IncompleteNotificationError("Incomplete XML content")
    
    verify_digest(xml_str, md5content, password, check_digest, check_signature)
    
    notification = NotificationResponse(
        mapiversion=mapiversion,
        md5content=md5content,
        result=from_wire(OrderNotificationResult, flatten_result(result)),
    )
    logger.info(
        f"Notification decoded: operation={notification.result.operation}, "
        f"status={notification.result.status}, transid={notification.result.transid}"
    )
    return notification


def extract_notification_xml(form_body: str) -> str:
    """Return the ``xml`` field of a url-encoded notification body.
    
    Raises:
        IncompleteNotificationError: If the body has no ``xml`` field
    """
    values = parse_qs(form_body, keep_blank_values=True).get(NOTIFICATION_FORM_FIELD)
    if not values:
        raise IncompleteNotificationError(
            f"Notification body has no {NOTIFICATION_FORM_FIELD} field"
        )
    return values[0]
