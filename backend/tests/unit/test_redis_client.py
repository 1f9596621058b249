import pytest

from portal.errors import InitializationError
from portal.infra.redis import connection_kwargs, create_client


def test_connection_kwargs_carry_credentials():
    kwargs = connection_kwargs({"url": "redis://cache:6379", "username": "svc", "password": "pw", "db": "3"})

    assert kwargs == {"decode_responses": True, "username": "svc", "password": "pw", "db": 3}


def test_connection_kwargs_skip_empty_fields():
    assert connection_kwargs({"url": "redis://cache:6379", "password": "", "db": None}) == {"decode_responses": True}


def test_create_client_requires_url(settings_factory):
    with pytest.raises(InitializationError):
        create_client(settings_factory(store_config={"password": "pw"}))
