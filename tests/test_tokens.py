"""
Tests for signed token issue / verification.
"""

import json
from base64 import urlsafe_b64encode

import pytest

from auth.exceptions import InvalidToken
from auth.tokens import _sign, issue_token, verify_token

SECRET = "test-secret"
DAY = 86400
T0 = 1_700_000_000


class TestIssueAndVerify:
    def test_round_trip_returns_claims(self):
        token = issue_token({"id": 7, "username": "alice"}, SECRET, DAY, now=T0)
        payload = verify_token(token, SECRET, now=T0 + 10)

        assert payload["id"] == 7
        assert payload["username"] == "alice"
        assert payload["iat"] == T0
        assert payload["exp"] == T0 + DAY

    def test_repeated_verification_is_stable(self):
        token = issue_token({"id": 1, "username": "bob"}, SECRET, DAY, now=T0)
        first = verify_token(token, SECRET, now=T0 + 1)
        second = verify_token(token, SECRET, now=T0 + 2)
        assert first == second

    def test_same_claims_same_second_give_same_token(self):
        a = issue_token({"id": 1, "username": "bob"}, SECRET, DAY, now=T0)
        b = issue_token({"id": 1, "username": "bob"}, SECRET, DAY, now=T0)
        assert a == b

    def test_token_is_url_safe(self):
        token = issue_token({"id": 1, "username": "?>?>?>"}, SECRET, DAY, now=T0)
        assert "+" not in token and "/" not in token


class TestExpiry:
    def test_valid_just_before_expiry(self):
        token = issue_token({"id": 1, "username": "bob"}, SECRET, DAY, now=T0)
        assert verify_token(token, SECRET, now=T0 + DAY - 1)["username"] == "bob"

    def test_rejected_at_expiry(self):
        token = issue_token({"id": 1, "username": "bob"}, SECRET, DAY, now=T0)
        with pytest.raises(InvalidToken):
            verify_token(token, SECRET, now=T0 + DAY)

    def test_rejected_after_expiry(self):
        token = issue_token({"id": 1, "username": "bob"}, SECRET, DAY, now=T0)
        with pytest.raises(InvalidToken):
            verify_token(token, SECRET, now=T0 + DAY + 3600)


class TestRejection:
    def _token(self):
        return issue_token({"id": 1, "username": "bob"}, SECRET, DAY, now=T0)

    def test_wrong_secret(self):
        with pytest.raises(InvalidToken):
            verify_token(self._token(), "rotated-secret", now=T0)

    def test_tampered_payload(self):
        body, sig = self._token().split(".")
        forged = urlsafe_b64encode(
            json.dumps({"id": 2, "username": "mallory", "iat": T0, "exp": T0 + DAY}).encode()
        ).decode()
        with pytest.raises(InvalidToken):
            verify_token(f"{forged}.{sig}", SECRET, now=T0)

    def test_tampered_signature(self):
        body, sig = self._token().split(".")
        flipped = ("0" if sig[0] != "0" else "1") + sig[1:]
        with pytest.raises(InvalidToken):
            verify_token(f"{body}.{flipped}", SECRET, now=T0)

    def test_truncated(self):
        token = self._token()
        with pytest.raises(InvalidToken):
            verify_token(token[: len(token) // 2], SECRET, now=T0)

    @pytest.mark.parametrize(
        "garbage",
        ["", "garbage", "a.b.c", ".", "abc.", ".abc", "!!!!.deadbeef", "héllo.wörld"],
    )
    def test_malformed(self, garbage):
        with pytest.raises(InvalidToken):
            verify_token(garbage, SECRET, now=T0)

    def test_signed_payload_without_expiry(self):
        raw = json.dumps({"id": 1, "username": "bob"}).encode()
        token = urlsafe_b64encode(raw).decode() + "." + _sign(SECRET, raw)
        with pytest.raises(InvalidToken):
            verify_token(token, SECRET, now=T0)

    def test_signed_non_object_payload(self):
        raw = b"[1, 2, 3]"
        token = urlsafe_b64encode(raw).decode() + "." + _sign(SECRET, raw)
        with pytest.raises(InvalidToken):
            verify_token(token, SECRET, now=T0)
