import pytest

from menulens.config.loader import ConfigLoader, load_config_for_environment
from menulens.config.settings import Environment, RenderStrategy


def test_defaults_without_env_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    settings = load_config_for_environment("testing")

    assert settings.environment == Environment.TESTING
    assert settings.menu.fallback_description == "description not found"
    assert settings.overlay.strategy == RenderStrategy.NATURAL


def test_env_file_is_used(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env.staging").write_text("APP_NAME=MenuLens Staging\nPORT=9000\n")

    settings = ConfigLoader.load_environment_config("staging")

    assert settings.app_name == "MenuLens Staging"
    assert settings.port == 9000
    assert ConfigLoader.get_available_environments() == ["staging"]


def test_unknown_environment():
    with pytest.raises(ValueError):
        ConfigLoader.load_environment_config("moon")


def test_sample_file_lists_overlay_keys(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = ConfigLoader.create_sample_env_file("production")

    content = (tmp_path / path).read_text()
    assert "OVERLAY_STRATEGY=natural" in content
    assert "VISION_USE_MOCK=false" in content
    assert ConfigLoader.get_available_environments() == []
    assert ConfigLoader.validate_environment_config("staging")


def test_nested_settings_read_env_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("VISION_API_KEY", raising=False)
    monkeypatch.delenv("OVERLAY_STRATEGY", raising=False)
    (tmp_path / ".env.staging").write_text(
        "VISION_API_KEY=real-key\n"
        "OVERLAY_STRATEGY=scaled\n"
        "PREPROCESS_MAX_SIZE_MB=0.5\n"
        "SECURITY_CORS_ORIGINS=https://a.example, https://b.example\n"
        "PORT=9000\n"
    )

    settings = ConfigLoader.load_environment_config("staging")

    assert settings.port == 9000
    assert settings.vision.api_key == "real-key"
    assert settings.vision.has_credentials
    assert settings.overlay.strategy == RenderStrategy.SCALED
    assert settings.preprocess.max_size_mb == 0.5
    assert settings.security.cors_origins == ["https://a.example", "https://b.example"]


def test_production_requires_credentials(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("VISION_API_KEY", raising=False)
    monkeypatch.delenv("VISION_ACCESS_TOKEN", raising=False)
    monkeypatch.delenv("VISION_USE_MOCK", raising=False)

    assert not ConfigLoader.validate_environment_config("production")

    (tmp_path / ".env.production").write_text("VISION_ACCESS_TOKEN=tok\n")
    assert ConfigLoader.validate_environment_config("production")
