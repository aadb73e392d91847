from datetime import timedelta
from types import SimpleNamespace

import pytest
from jose import jwt

from eduopps.core.clock import days_until_deadline, is_deadline_passed
from eduopps.core.config import settings
from eduopps.core.errors import CapacityExceeded, NotFoundError, TokenError, get_error_message
from eduopps.core.security import create_access_token, decode_access_token
from conftest import NOW, FixedClock


class TestTokens:
    def test_round_trip(self):
        payload = decode_access_token(create_access_token(42))
        assert payload["sub"] == "42"
        assert payload["type"] == "access"
        assert payload["iss"] == settings.TOKEN_ISSUER

    def test_expired_token(self):
        token = create_access_token(42, expires_delta=timedelta(seconds=-5))
        with pytest.raises(TokenError):
            decode_access_token(token)

    def test_foreign_issuer(self):
        token = jwt.encode(
            {"sub": "42", "type": "access", "iss": "someone-else"},
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM
        )
        with pytest.raises(TokenError):
            decode_access_token(token)

    def test_wrong_token_type(self):
        token = create_access_token(42, extra_claims={"type": "refresh"})
        # type is always overwritten with "access"
        assert decode_access_token(token)["type"] == "access"

        token = jwt.encode(
            {"sub": "42", "type": "refresh", "iss": settings.TOKEN_ISSUER},
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM
        )
        with pytest.raises(TokenError):
            decode_access_token(token)


class TestDeadlines:
    def test_future_deadline(self):
        opportunity = SimpleNamespace(application_deadline=NOW + timedelta(days=2, hours=3))
        assert not is_deadline_passed(opportunity, FixedClock())
        assert days_until_deadline(opportunity, FixedClock()) == 2

    def test_past_deadline(self):
        opportunity = SimpleNamespace(application_deadline=(NOW - timedelta(days=1)).replace(tzinfo=None))
        assert is_deadline_passed(opportunity, FixedClock())
        assert days_until_deadline(opportunity, FixedClock()) == 0


class TestErrorEnvelope:
    def test_capacity_error_carries_spaces_left(self):
        body = get_error_message(CapacityExceeded(spaces_left=0))
        assert body["status_code"] == 409
        assert body["error_code"] == "CAPACITY_EXCEEDED"
        assert body["details"] == {"spaces_left": 0}
        assert body["success"] is False

    def test_details_can_be_suppressed(self):
        body = get_error_message(NotFoundError("Opportunity 3 not found"), include_details=False)
        assert body == {
            "success": False,
            "error_code": "NOT_FOUND",
            "message": "Opportunity 3 not found",
            "status_code": 404
        }
