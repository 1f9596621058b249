import pytest
from jwt import ExpiredSignatureError, InvalidTokenError

from portal.infra import jwt as jwt_helper


def test_custom_token_roundtrip(settings):
    token = jwt_helper.encode_custom_token(settings, "faculty-1", name="Dr. Smith")
    payload = jwt_helper.decode_custom_token(settings, token)
    assert payload["sub"] == "faculty-1"
    assert payload["name"] == "Dr. Smith"
    assert payload["iss"] == jwt_helper.ISSUER
    assert payload["aud"] == jwt_helper.AUDIENCE


def test_token_signed_with_other_secret_is_rejected(settings, settings_factory):
    token = jwt_helper.encode_custom_token(settings_factory(secret_key="other"), "faculty-1")
    with pytest.raises(InvalidTokenError):
        jwt_helper.decode_custom_token(settings, token)


def test_expired_token_is_rejected(settings):
    token = jwt_helper.encode_custom_token(settings, "faculty-1", ttl_seconds=-60)
    with pytest.raises(ExpiredSignatureError):
        jwt_helper.decode_custom_token(settings, token)
