"""Tests for response classification."""

import httpx
import pytest

from xhs_client.classifier import VERIFICATION_STATUSES, classify, classify_response, parse_body
from xhs_client.exceptions import (
    DataFetchError,
    ErrorCode,
    IPBlockedError,
    NeedVerificationError,
    ResponseError,
    SignatureRejectedError,
)
from xhs_client.models import ChallengeInfo


class TestClassify:
    """Tests for classify function."""

    def test_success_returns_data(self):
        """Success envelope returns its data."""
        assert classify(200, {}, {"success": True, "data": {"a": 1}}) == {"a": 1}

    def test_success_without_data(self):
        """Success envelope without data returns the success flag."""
        assert classify(200, {}, {"success": True}) is True
        assert classify(200, {}, {"success": True, "data": None}) is True

    def test_success_with_empty_payloads(self):
        """Empty containers and falsy scalars are returned as the payload."""
        assert classify(200, {}, {"success": True, "data": {}}) == {}
        assert classify(200, {}, {"success": True, "data": []}) == []
        assert classify(200, {}, {"success": True, "data": 0}) == 0

    def test_empty_body_passes_response_through(self):
        """Empty body returns the raw response object."""
        response = httpx.Response(200)
        assert classify(200, {}, None, response=response) is response
        assert classify(200, {}, "", response=response) is response

    def test_verification_challenge(self):
        """Verification status raises with the challenge headers."""
        with pytest.raises(NeedVerificationError) as exc_info:
            classify(471, {"verifytype": "v1", "verifyuuid": "u1"}, {"success": False})

        assert exc_info.value.challenge == ChallengeInfo(verify_type="v1", verify_uuid="u1")
        assert exc_info.value.status_code == 471

    def test_verification_precedes_success(self):
        """A verification status wins even over a success body."""
        for status in VERIFICATION_STATUSES:
            with pytest.raises(NeedVerificationError):
                classify(status, {}, {"success": True, "data": {"a": 1}})

    def test_verification_headers_case_insensitive(self):
        """Challenge headers are looked up case-insensitively."""
        with pytest.raises(NeedVerificationError) as exc_info:
            classify(461, {"VerifyType": "102", "VerifyUuid": "abc"}, {"code": 0})

        assert exc_info.value.verify_type == "102"
        assert exc_info.value.verify_uuid == "abc"

    def test_missing_challenge_headers(self):
        """Missing challenge headers leave both fields None."""
        with pytest.raises(NeedVerificationError) as exc_info:
            classify(471, {}, {"success": False})

        assert exc_info.value.verify_type is None
        assert exc_info.value.verify_uuid is None

    def test_other_4xx_is_not_verification(self):
        """Only 461 and 471 are verification statuses."""
        with pytest.raises(DataFetchError):
            classify(403, {"verifytype": "v1"}, {"success": False})

    def test_ip_block(self):
        """IP block code raises IPBlockedError, never DataFetchError."""
        with pytest.raises(IPBlockedError) as exc_info:
            classify(200, {}, {"success": False, "code": ErrorCode.IP_BLOCK.code})

        assert not isinstance(exc_info.value, DataFetchError)
        assert str(exc_info.value) == ErrorCode.IP_BLOCK.msg

    def test_sign_fault(self):
        """Signature fault code raises SignatureRejectedError."""
        with pytest.raises(SignatureRejectedError):
            classify(200, {}, {"success": False, "code": 300015})

    def test_other_code(self):
        """Unknown codes raise DataFetchError carrying the envelope."""
        body = {"success": False, "code": -100, "msg": "login expired"}
        with pytest.raises(DataFetchError) as exc_info:
            classify(200, {"x-trace": "t"}, body)

        error = exc_info.value
        assert error.envelope.code == -100
        assert error.envelope.msg == "login expired"
        assert error.headers == {"x-trace": "t"}
        assert error.status_code == 200

    def test_non_json_body(self):
        """A text body is a failed fetch."""
        with pytest.raises(DataFetchError) as exc_info:
            classify(502, {}, "<html>Bad Gateway</html>")

        assert exc_info.value.envelope.success is False

    def test_classify_is_deterministic(self):
        """Identical inputs always yield the same outcome kind."""
        cases = [
            (200, {}, {"success": True, "data": {"a": 1}}),
            (471, {"verifytype": "v1"}, {"success": True}),
            (200, {}, {"success": False, "code": 300012}),
            (200, {}, {"success": False, "code": 300015}),
            (200, {}, {"success": False, "code": 1}),
        ]
        for status, headers, body in cases:
            outcomes = []
            for _ in range(2):
                try:
                    outcomes.append(("ok", classify(status, headers, body)))
                except ResponseError as e:
                    outcomes.append(("error", type(e)))
            assert outcomes[0] == outcomes[1]

    def test_all_failures_are_response_errors(self):
        """Every classified failure derives from ResponseError."""
        for error_type in (NeedVerificationError, IPBlockedError, SignatureRejectedError, DataFetchError):
            assert issubclass(error_type, ResponseError)


class TestClassifyResponse:
    """Tests for classify_response and parse_body."""

    def test_json_response(self):
        """JSON responses are parsed and classified."""
        response = httpx.Response(200, json={"success": True, "data": [1, 2]})
        assert classify_response(response) == [1, 2]

    def test_verification_response(self):
        """Verification challenge is read from real response headers."""
        response = httpx.Response(
            471,
            headers={"verifytype": "v1", "verifyuuid": "u1"},
            json={"success": True},
        )
        with pytest.raises(NeedVerificationError) as exc_info:
            classify_response(response)

        assert exc_info.value.response is response
        assert exc_info.value.challenge == ChallengeInfo("v1", "u1")

    def test_parse_body_text(self):
        """Non-JSON content is returned as text."""
        assert parse_body(httpx.Response(200, text="plain")) == "plain"

    def test_parse_body_empty(self):
        """Empty content parses to None."""
        assert parse_body(httpx.Response(200)) is None
