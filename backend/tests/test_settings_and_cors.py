from __future__ import annotations

import pytest

from conftest import make_settings
from portfolio_api.middleware.cors import DEV_ORIGINS, allow_credentials, build_allowed_origins


@pytest.mark.parametrize(
    "raw,expected",
    [("prod", "production"), ("Production", "production"), ("stage", "staging"), ("dev", "development"), ("", "development")],
)
def test_environment_normalization(raw, expected):
    assert make_settings(ENVIRONMENT=raw).normalized_environment == expected


def test_require_runtime_config_lists_missing_settings():
    make_settings().require_runtime_config()

    with pytest.raises(RuntimeError) as ei:
        make_settings(MONGO_URI=None, JWT_SECRET="  ", CLOUDINARY_API_KEY=None).require_runtime_config()
    msg = str(ei.value)
    assert "MONGO_URI" in msg
    assert "JWT_SECRET" in msg
    assert "CLOUDINARY_API_KEY" in msg
    assert "CLOUDINARY_CLOUD_NAME" not in msg


def test_log_safe_dict_hides_secrets():
    safe = make_settings().to_log_safe_dict()
    flat = repr(safe)
    assert "test-secret" not in flat
    assert "shh" not in flat
    assert "mongodb://" not in flat
    assert safe["auth"]["jwt_secret_configured"] is True
    assert safe["images"]["cloudinary_api_secret_configured"] is True


def test_cors_dev_origins_outside_production():
    origins = build_allowed_origins(make_settings(FRONTEND_URL="https://site.example/"))
    assert "https://site.example" in origins
    assert set(DEV_ORIGINS) <= set(origins)
    assert allow_credentials(origins) is True


def test_cors_production_is_explicit():
    origins = build_allowed_origins(
        make_settings(ENVIRONMENT="production", FRONTEND_URL="https://site.example", CORS_ORIGINS="https://admin.example, ")
    )
    assert origins == ["https://admin.example", "https://site.example"]


def test_cors_wildcard():
    origins = build_allowed_origins(make_settings(CORS_ORIGINS="*"))
    assert origins == ["*"]
    assert allow_credentials(origins) is False
