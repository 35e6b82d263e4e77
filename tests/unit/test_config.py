"""Tests for settings parsing and config constants."""

import pytest
from pydantic import ValidationError

from app.config import LabelStatus, Settings, UserRole
from app.core.logging import use_console_renderer


@pytest.mark.unit
class TestSettings:
    """Tests for Settings validators and defaults."""

    def test_defaults(self) -> None:
        s = Settings(SECRET_KEY="k" * 32, _env_file=None)  # type: ignore[call-arg]

        assert s.DATABASE_URL.startswith("sqlite+aiosqlite://")
        assert s.FINAL_TAG_THRESHOLD == 0.5
        assert s.ACCESS_TOKEN_EXPIRE_MINUTES == 24 * 60
        assert s.MAX_SUGGESTIONS == 3

    def test_cors_origins_from_comma_separated_string(self) -> None:
        s = Settings(SECRET_KEY="k" * 32, CORS_ORIGINS="http://a.test, http://b.test", _env_file=None)  # type: ignore[call-arg]

        assert s.CORS_ORIGINS == ["http://a.test", "http://b.test"]

    def test_allowed_image_types_lowercased(self) -> None:
        s = Settings(SECRET_KEY="k" * 32, ALLOWED_IMAGE_TYPES="PNG, Jpeg,", _env_file=None)  # type: ignore[call-arg]

        assert s.ALLOWED_IMAGE_TYPES == ["png", "jpeg"]

    @pytest.mark.parametrize("threshold", [0.0, -0.1, 1.5])
    def test_threshold_bounds(self, threshold: float) -> None:
        with pytest.raises(ValidationError):
            Settings(SECRET_KEY="k" * 32, FINAL_TAG_THRESHOLD=threshold, _env_file=None)  # type: ignore[call-arg]

    def test_invalid_environment(self) -> None:
        with pytest.raises(ValidationError):
            Settings(SECRET_KEY="k" * 32, ENVIRONMENT="qa", _env_file=None)  # type: ignore[call-arg]

    def test_development_logs_to_console_by_default(self) -> None:
        s = Settings(SECRET_KEY="k" * 32, ENVIRONMENT="development", _env_file=None)  # type: ignore[call-arg]

        assert s.LOG_FORMAT == "console"
        assert use_console_renderer(s.ENVIRONMENT, s.LOG_FORMAT) is True

    def test_json_in_development_when_requested(self) -> None:
        s = Settings(SECRET_KEY="k" * 32, ENVIRONMENT="development", LOG_FORMAT="json", _env_file=None)  # type: ignore[call-arg]

        assert use_console_renderer(s.ENVIRONMENT, s.LOG_FORMAT) is False

    def test_production_always_json(self) -> None:
        s = Settings(SECRET_KEY="k" * 32, ENVIRONMENT="production", _env_file=None)  # type: ignore[call-arg]

        assert use_console_renderer(s.ENVIRONMENT, s.LOG_FORMAT) is False

    def test_unknown_log_format(self) -> None:
        with pytest.raises(ValidationError):
            Settings(SECRET_KEY="k" * 32, LOG_FORMAT="xml", _env_file=None)  # type: ignore[call-arg]


@pytest.mark.unit
class TestConstants:
    """Tests for role and status constants."""

    def test_roles(self) -> None:
        assert UserRole.ADMIN == "admin"
        assert UserRole.LABELER == "labeler"
        assert set(UserRole.ALL) == {"admin", "labeler"}

    def test_label_status(self) -> None:
        assert LabelStatus.DONE == "done"
        assert LabelStatus.PENDING == "pending"
