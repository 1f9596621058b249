"""Settings for the faculty portal backend."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from portal.errors import InitializationError


def _env_field(default, *env_names: str):
	if env_names:
		alias = AliasChoices(*env_names) if len(env_names) > 1 else env_names[0]
		return Field(default=default, validation_alias=alias)
	return Field(default=default)


class Settings(BaseSettings):
	app_id: str = _env_field("default-app-id", "APP_ID", "PORTAL_APP_ID")
	# Connection credentials for the document store. Must carry at least a url.
	store_config: Union[str, Dict[str, Any]] = _env_field({}, "STORE_CONFIG", "PORTAL_STORE_CONFIG")
	initial_auth_token: Optional[str] = _env_field(None, "INITIAL_AUTH_TOKEN")
	secret_key: str = _env_field("dev-secret-change-me", "SECRET_KEY")
	custom_token_ttl_seconds: int = _env_field(3600, "CUSTOM_TOKEN_TTL_SECONDS")

	# Realtime listeners poll the change streams; block_ms=None means non-blocking reads.
	subscription_poll_interval_seconds: float = _env_field(0.5, "SUBSCRIPTION_POLL_INTERVAL_SECONDS")
	subscription_block_ms: Optional[int] = _env_field(1000, "SUBSCRIPTION_BLOCK_MS")

	default_profile_name: str = _env_field("Dr. Jane Smith", "DEFAULT_PROFILE_NAME")
	default_profile_email: str = _env_field("jane.smith@rbc.edu", "DEFAULT_PROFILE_EMAIL")
	default_course: str = _env_field("CS101", "DEFAULT_COURSE")
	available_courses: Union[str, Tuple[str, ...]] = _env_field(("CS101", "BIO205", "ENG300"), "AVAILABLE_COURSES")

	environment: str = _env_field("production", "ENV", "APP_ENV", "ENVIRONMENT")
	obs_enabled: bool = _env_field(True, "OBS_ENABLED")
	obs_log_level: str = _env_field("INFO", "LOG_LEVEL")
	service_name: str = _env_field("faculty-portal", "SERVICE_NAME")
	git_commit: str = _env_field("unknown", "GIT_COMMIT", "COMMIT_SHA", "SOURCE_VERSION")

	model_config = SettingsConfigDict(
		env_prefix="",
		env_file=".env",
		case_sensitive=False,
		populate_by_name=True,
		extra="ignore",
	)

	def is_prod(self) -> bool:
		return self.environment.lower() in ("prod", "production", "live")

	def is_dev(self) -> bool:
		return self.environment.lower() in ("dev", "development")

	@field_validator("store_config", mode="before")
	@classmethod
	def _parse_store_config(cls, value):
		if value in (None, ""):
			return {}
		if isinstance(value, str):
			try:
				data = json.loads(value)
			except ValueError:
				# A bare url is accepted as shorthand.
				return {"url": value.strip()}
			return data if isinstance(data, dict) else {}
		return value

	@field_validator("available_courses", mode="before")
	@classmethod
	def _split_courses(cls, value):
		"""Accept a comma-separated string, a JSON list or any iterable."""
		if value in (None, ""):
			return ()
		if isinstance(value, (list, tuple, set)):
			return tuple(str(item).strip() for item in value if str(item).strip())
		if isinstance(value, str):
			text = value.strip()
			if text.startswith("["):
				try:
					data = json.loads(text)
				except ValueError:
					data = None
				if isinstance(data, list):
					return tuple(str(item).strip() for item in data if str(item).strip())
			return tuple(part.strip() for part in text.split(",") if part.strip())
		return value

	def store_url(self) -> str:
		return str(self.store_config.get("url") or "").strip()

	def profile_path(self, user_id: str) -> str:
		return f"artifacts/{self.app_id}/users/{user_id}/faculty_profile/user_data"

	def assignments_path(self) -> str:
		return f"artifacts/{self.app_id}/public/data/assignments"

	def schedule_path(self) -> str:
		return f"artifacts/{self.app_id}/public/data/schedule"


def require_store_config(settings: Settings) -> Dict[str, Any]:
	"""Return the store config or raise InitializationError when it is unusable."""
	config = settings.store_config or {}
	if not config:
		raise InitializationError("store_config_missing")
	if not settings.store_url():
		raise InitializationError("store_url_missing")
	return config


def load_settings(**overrides: Any) -> Settings:
	return Settings(**overrides)
