import pytest

from portal.errors import InitializationError
from portal.settings import require_store_config


def test_store_config_accepts_json_string(settings_factory):
    settings = settings_factory(store_config='{"url": "redis://cache:6379/2", "password": "pw"}')
    assert settings.store_config == {"url": "redis://cache:6379/2", "password": "pw"}
    assert settings.store_url() == "redis://cache:6379/2"


def test_store_config_accepts_bare_url(settings_factory):
    settings = settings_factory(store_config="redis://cache:6379/0")
    assert settings.store_config == {"url": "redis://cache:6379/0"}


@pytest.mark.parametrize(
    "config, reason",
    [
        ({}, "store_config_missing"),
        ("", "store_config_missing"),
        ({"password": "pw"}, "store_url_missing"),
    ],
)
def test_require_store_config_rejects_unusable_config(settings_factory, config, reason):
    settings = settings_factory(store_config=config)
    with pytest.raises(InitializationError) as excinfo:
        require_store_config(settings)
    assert excinfo.value.reason == reason


def test_available_courses_split_from_string(settings_factory):
    assert settings_factory(available_courses="CS101, BIO205 ,ENG300").available_courses == ("CS101", "BIO205", "ENG300")
    assert settings_factory(available_courses='["MATH1"]').available_courses == ("MATH1",)


def test_document_paths_are_scoped_by_app_id(settings):
    assert settings.profile_path("u-1") == "artifacts/test-app/users/u-1/faculty_profile/user_data"
    assert settings.assignments_path() == "artifacts/test-app/public/data/assignments"
    assert settings.schedule_path() == "artifacts/test-app/public/data/schedule"
