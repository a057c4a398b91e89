"""Unit tests for notification decoding and digest verification."""

import hashlib
import logging
from urllib.parse import urlencode

import pytest

from hipay_professional.models import NotificationOperation, NotificationStatus
from hipay_professional.soap.notification import (
    DigestScheme,
    decode_digest,
    extract_notification_xml,
    parse_notification,
    result_fragment,
    verification_plan,
    verify_digest,
)
from hipay_professional.utils.exceptions import (
    BadDigestError,
    BadSignatureError,
    IncompleteNotificationError,
    InvalidDigestError,
    NotificationDecodeError,
)

PASSWORD = "test-password"
TAMPERED = "0123456789abcdef0123456789abcdef"
SPACED = " ".join(TAMPERED[i:i + 2] for i in range(0, len(TAMPERED), 2))


class TestVerificationPlan:
    """Test the check_digest/check_signature decision table."""

    @pytest.mark.parametrize(
        "check_digest,check_signature,plan",
        [
            (True, True, (DigestScheme.SIGNATURE,)),
            (False, True, (DigestScheme.SIGNATURE,)),
            (True, False, (DigestScheme.DIGEST_ONLY, DigestScheme.SIGNATURE)),
            (False, False, ()),
        ],
    )
    def test_plan(self, check_digest, check_signature, plan):
        """Test the schemes tried for each flag combination."""
        assert verification_plan(check_digest, check_signature) == plan


class TestDecodeDigest:
    """Test md5content decoding."""

    def test_valid_digest(self):
        """Test a 32 hex characters digest decodes to 16 bytes."""
        assert decode_digest(TAMPERED) == bytes.fromhex(TAMPERED)

    def test_surrounding_whitespace_ignored(self):
        """Test whitespace around the value is ignored."""
        assert len(decode_digest(f"\n  {TAMPERED}\n")) == 16

    @pytest.mark.parametrize("value", ["", "abcd", "zz" * 16, TAMPERED + "00", SPACED])
    def test_invalid_digest(self, value):
        """Test wrong length or non-hex values are rejected."""
        with pytest.raises(InvalidDigestError, match="md5content digest is invalid"):
            decode_digest(value)


class TestResultFragment:
    """Test extraction of the digested bytes."""

    def test_fragment_is_raw_result(self, build_notification, notification_result):
        """Test the fragment is the result element exactly as sent."""
        xml_str = build_notification()

        assert result_fragment(xml_str) == notification_result.encode("utf-8")

    def test_result_with_attributes(self):
        """Test the start tag may carry attributes."""
        xml_str = '<mapi><result id="1"><a/></result></mapi>'

        assert result_fragment(xml_str) == b'<result id="1"><a/></result>'

    def test_similar_tag_not_matched(self):
        """Test <resultCode> is not taken for <result>."""
        with pytest.raises(IncompleteNotificationError, match="result begin"):
            result_fragment("<mapi><resultCode>1</resultCode></mapi>")

    def test_missing_end(self):
        """Test a missing end tag is reported."""
        with pytest.raises(IncompleteNotificationError, match="result end"):
            result_fragment("<mapi><result>")


class TestVerifyDigest:
    """Test digest and signature verification."""

    def test_signature_accepted_by_default(self, build_notification):
        """Test digest mode falls back to the signature."""
        xml_str = build_notification("signature")
        md5content = xml_str.split("<md5content>")[1].split("</md5content>")[0]

        assert verify_digest(xml_str, md5content, PASSWORD) is DigestScheme.SIGNATURE

    def test_legacy_digest_accepted_by_default(self, build_notification):
        """Test digest mode accepts the digest without password."""
        xml_str = build_notification("digest")
        md5content = xml_str.split("<md5content>")[1].split("</md5content>")[0]

        assert verify_digest(xml_str, md5content, PASSWORD) is DigestScheme.DIGEST_ONLY

    def test_disabled_verification_warns(self, build_notification, caplog):
        """Test no verification happens when both checks are off."""
        xml_str = build_notification(md5content=TAMPERED)

        with caplog.at_level(logging.WARNING):
            assert verify_digest(xml_str, TAMPERED, PASSWORD, False, False) is None

        assert "DISABLED" in caplog.text


class TestParseNotification:
    """Test complete notification decoding."""

    def test_signed_notification(self, build_notification):
        """Test a signed capture notification is decoded."""
        notification = parse_notification(build_notification("signature"), PASSWORD)

        assert notification.mapiversion == "1.0"
        result = notification.result
        assert result.operation == NotificationOperation.CAPTURE
        assert result.status == NotificationStatus.OK
        assert result.transid == "5CF68C1301DC7655"
        assert result.orig_amount == "14.39"
        assert result.orig_currency == "EUR"
        assert result.id_for_merchant == "REF1"
        assert result.email_client == "customer@example.com"
        assert result.is3ds == "No"
        assert result.payment_method == "VISA"

    def test_declared_encoding_ignored(self, build_notification, notification_result):
        """Test non-ASCII values survive a Latin-1 declaration on decoded text."""
        result = notification_result.replace("customer@example.com", "josé@example.fr")
        xml_str = build_notification(result=result).replace(
            'encoding="UTF-8"', 'encoding="ISO-8859-1"'
        )

        notification = parse_notification(xml_str, PASSWORD)

        assert notification.result.email_client == "josé@example.fr"

    def test_merchant_datas(self, build_notification):
        """Test merchant data keys are stripped of their prefix."""
        notification = parse_notification(build_notification(), PASSWORD)

        assert notification.result.merchant_datas == {"sessionId": "123456789", "cartId": "42"}

    def test_empty_element_is_absent(self, build_notification):
        """Test elements without text leave the field unset."""
        notification = parse_notification(build_notification(), PASSWORD)

        assert notification.result.return_code is None
        assert notification.result.refunded_amount is None

    def test_md5content_kept_as_received(self, build_notification):
        """Test md5content is exposed unmodified."""
        xml_str = build_notification("digest")
        expected = xml_str.split("<md5content>")[1].split("</md5content>")[0]

        assert parse_notification(xml_str, PASSWORD).md5content == expected

    def test_signature_only_accepts_signature(self, build_notification):
        """Test check_signature accepts a signed notification."""
        notification = parse_notification(
            build_notification("signature"), PASSWORD, check_signature=True
        )

        assert notification.result.transid == "5CF68C1301DC7655"

    def test_signature_only_rejects_legacy_digest(self, build_notification, notification_result):
        """Test check_signature refuses the digest without password."""
        received = hashlib.md5(notification_result.encode("utf-8")).hexdigest()
        expected = hashlib.md5((notification_result + PASSWORD).encode("utf-8")).hexdigest()

        with pytest.raises(BadSignatureError) as exc_info:
            parse_notification(build_notification("digest"), PASSWORD, check_signature=True)

        assert str(exc_info.value) == f"Bad signature: {received}(current) != {expected}(expected)"

    def test_tampered_digest(self, build_notification, notification_result):
        """Test both schemes are reported when nothing matches."""
        digest = hashlib.md5(notification_result.encode("utf-8")).hexdigest()
        signature = hashlib.md5((notification_result + PASSWORD).encode("utf-8")).hexdigest()

        with pytest.raises(BadDigestError) as exc_info:
            parse_notification(build_notification(md5content=TAMPERED), PASSWORD)

        assert str(exc_info.value) == (
            f"Bad digest: {TAMPERED}(current) != {digest}(expected), "
            f"{TAMPERED}(current) != {signature}(expected)"
        )

    def test_wrong_password(self, build_notification):
        """Test a notification signed with another password is rejected."""
        xml_str = build_notification("signature", password="other-password")

        with pytest.raises(BadDigestError):
            parse_notification(xml_str, PASSWORD)

    def test_tampered_result(self, build_notification):
        """Test changing the result after signing breaks the signature."""
        xml_str = build_notification("signature").replace("14.39", "1.39")

        with pytest.raises(BadSignatureError):
            parse_notification(xml_str, PASSWORD, check_signature=True)

    def test_tampered_digest_accepted_when_disabled(self, build_notification):
        """Test disabled verification decodes anyway."""
        notification = parse_notification(
            build_notification(md5content=TAMPERED), PASSWORD, check_digest=False
        )

        assert notification.md5content == TAMPERED

    @pytest.mark.parametrize(
        "check_digest,check_signature",
        [(True, False), (False, True), (True, True)],
    )
    def test_invalid_digest_length(self, build_notification, check_digest, check_signature):
        """Test a digest that is not 16 bytes is rejected in every checking mode."""
        with pytest.raises(InvalidDigestError, match="md5content digest is invalid"):
            parse_notification(
                build_notification(md5content="abcd"),
                PASSWORD,
                check_digest=check_digest,
                check_signature=check_signature,
            )

    def test_spaced_digest_rejected(self, build_notification, notification_result):
        """Test hex pairs separated by spaces are not a valid digest."""
        digest = hashlib.md5((notification_result + PASSWORD).encode("utf-8")).hexdigest()
        spaced = " ".join(digest[i:i + 2] for i in range(0, len(digest), 2))

        with pytest.raises(InvalidDigestError, match="md5content digest is invalid"):
            parse_notification(build_notification(md5content=spaced), PASSWORD)

    def test_invalid_digest_ignored_when_disabled(self, build_notification):
        """Test the digest is not even decoded when checks are off."""
        notification = parse_notification(
            build_notification(md5content="abcd"), PASSWORD, check_digest=False
        )

        assert notification.md5content == "abcd"

    @pytest.mark.parametrize("xml_str", ["", "   \n"])
    def test_empty_content(self, xml_str):
        """Test empty content is incomplete."""
        with pytest.raises(IncompleteNotificationError, match="Incomplete XML content"):
            parse_notification(xml_str, PASSWORD)

    def test_malformed_xml(self, load_fixture):
        """Test unbalanced XML cannot be decoded."""
        with pytest.raises(NotificationDecodeError, match="Can't decode XML content"):
            parse_notification(load_fixture("notification_malformed.xml"), PASSWORD)

    def test_missing_md5content(self, load_fixture):
        """Test a notification without md5content is incomplete."""
        with pytest.raises(IncompleteNotificationError, match="Incomplete XML content"):
            parse_notification(load_fixture("notification_incomplete.xml"), PASSWORD)

    def test_wrong_root(self):
        """Test a document that is not a mapi message is incomplete."""
        xml_str = (
            "<other><mapiversion>1.0</mapiversion>"
            f"<md5content>{TAMPERED}</md5content><result/></other>"
        )

        with pytest.raises(IncompleteNotificationError):
            parse_notification(xml_str, PASSWORD, check_digest=False)

    def test_soap_response_is_incomplete(self, load_fixture):
        """Test a SOAP response is not mistaken for a notification."""
        with pytest.raises(IncompleteNotificationError):
            parse_notification(load_fixture("response_capture.xml"), PASSWORD)


class TestExtractNotificationXml:
    """Test extraction of the xml form field."""

    def test_extract(self, build_notification):
        """Test the url-encoded xml field is decoded."""
        xml_str = build_notification()

        assert extract_notification_xml(urlencode({"xml": xml_str})) == xml_str

    def test_missing_field(self):
        """Test a body without xml field is incomplete."""
        with pytest.raises(IncompleteNotificationError, match="xml field"):
            extract_notification_xml("foo=bar")
