"""
Token Service Tests
===================
"""

from datetime import datetime, timedelta, UTC
from uuid import uuid4

import pytest
from jose import jwt

from app.core.config import settings
from app.core.exceptions import TokenExpiredError, TokenInvalidError
from app.services.token_service import create_access_token, decode_token, get_actor_id


pytestmark = pytest.mark.unit


class TestTokenService:
    """Tests for bearer token creation and verification."""

    def test_round_trip_subject(self):
        # Arrange
        user_id = uuid4()

        # Act
        token = create_access_token(user_id)

        # Assert
        assert get_actor_id(token) == user_id

    def test_claims(self):
        # Act
        payload = decode_token(create_access_token(uuid4()))

        # Assert
        assert payload["iss"] == settings.ISSUER
        assert payload["aud"] == settings.AUDIENCE

    def test_expired_token(self):
        # Arrange
        token = create_access_token(uuid4(), expires_delta=timedelta(seconds=-1))

        # Act & Assert
        with pytest.raises(TokenExpiredError):
            decode_token(token)

    def test_wrong_secret(self):
        # Arrange
        token = jwt.encode(
            {
                "sub": str(uuid4()),
                "exp": datetime.now(UTC) + timedelta(minutes=5),
                "iss": settings.ISSUER,
                "aud": settings.AUDIENCE,
            },
            "some-other-secret",
            algorithm=settings.ALGORITHM,
        )

        # Act & Assert
        with pytest.raises(TokenInvalidError):
            decode_token(token)

    def test_wrong_audience(self):
        # Arrange
        token = jwt.encode(
            {
                "sub": str(uuid4()),
                "exp": datetime.now(UTC) + timedelta(minutes=5),
                "iss": settings.ISSUER,
                "aud": "someone-else",
            },
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )

        # Act & Assert
        with pytest.raises(TokenInvalidError):
            decode_token(token)

    def test_non_uuid_subject(self):
        # Arrange
        token = jwt.encode(
            {
                "sub": "user-42",
                "exp": datetime.now(UTC) + timedelta(minutes=5),
                "iss": settings.ISSUER,
                "aud": settings.AUDIENCE,
            },
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )

        # Act & Assert
        with pytest.raises(TokenInvalidError):
            get_actor_id(token)

    def test_garbage_token(self):
        with pytest.raises(TokenInvalidError):
            decode_token("not.a.token")
