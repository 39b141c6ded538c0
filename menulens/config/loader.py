"""
Configuration loader utility for environment-specific settings.
"""

import logging
import os
from pathlib import Path
from typing import Optional
from .settings import (
    Environment,
    MenuSettings,
    OverlaySettings,
    PreprocessSettings,
    SecuritySettings,
    Settings,
    VisionSettings,
)

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Utility class for loading environment-specific configurations"""

    @staticmethod
    def load_environment_config(environment: Optional[str] = None) -> Settings:
        """
        Load configuration for the specified environment.

        Args:
            environment: Target environment (development, staging, production, testing)
                        If None, uses ENVIRONMENT env var or defaults to development

        Returns:
            Settings instance with environment-specific configuration
        """
        if environment is None:
            environment = os.getenv("ENVIRONMENT", "development")

        env = Environment(environment.lower())
        env_file_path = Path(f".env.{env.value}")

        if env_file_path.exists():
            env_file = str(env_file_path)
            # nested settings read their own prefixes from the same file
            return Settings(
                _env_file=env_file,
                environment=env,
                vision=VisionSettings(_env_file=env_file),
                preprocess=PreprocessSettings(_env_file=env_file),
                menu=MenuSettings(_env_file=env_file),
                overlay=OverlaySettings(_env_file=env_file),
                security=SecuritySettings(_env_file=env_file),
            )

        logger.warning(f"Environment file {env_file_path} not found, using default settings")
        return Settings(environment=env)

    @staticmethod
    def get_available_environments() -> list[str]:
        """Get list of available environment configurations"""
        env_files = []
        for env_file in Path(".").glob(".env.*"):
            env_name = env_file.name.replace(".env.", "")
            if env_name.endswith(".sample"):
                continue
            env_files.append(env_name)
        return sorted(env_files)

    @staticmethod
    def validate_environment_config(environment: str) -> bool:
        """
        Validate that an environment configuration loads and is usable.

        Args:
            environment: Environment name to validate

        Returns:
            True if configuration is valid, False otherwise
        """
        try:
            settings = ConfigLoader.load_environment_config(environment)
        except ValueError as e:
            logger.error(f"Invalid configuration for {environment}: {e}")
            return False

        if not settings.vision.use_mock and not settings.vision.has_credentials:
            if settings.is_production():
                logger.error("Production requires VISION_API_KEY or VISION_ACCESS_TOKEN")
                return False
            logger.warning(
                "No VISION_API_KEY or VISION_ACCESS_TOKEN configured; "
                "the mock recognizer will be used"
            )

        required_settings = [
            settings.app_name,
            settings.environment,
            settings.host,
            settings.port,
        ]
        return all(setting is not None for setting in required_settings)

    @staticmethod
    def create_sample_env_file(environment: str, output_path: Optional[str] = None) -> str:
        """
        Create a sample .env file for the specified environment.

        Args:
            environment: Target environment
            output_path: Optional custom output path

        Returns:
            Path to the created sample file
        """
        env = Environment(environment.lower())

        if output_path is None:
            output_path = f".env.{env.value}.sample"

        default_settings = Settings()

        sample_content = f"""# Sample configuration for {env.value} environment
# Copy this file to .env.{env.value} and modify as needed

# Application Configuration
APP_NAME={default_settings.app_name}
APP_VERSION={default_settings.app_version}
ENVIRONMENT={env.value}
DEBUG={'true' if env == Environment.DEVELOPMENT else 'false'}

# Server Configuration
HOST={default_settings.host}
PORT={default_settings.port}
RELOAD={'true' if env == Environment.DEVELOPMENT else 'false'}
WORKERS={1 if env == Environment.DEVELOPMENT else 4}

# Logging Configuration
LOG_LEVEL={default_settings.log_level.value}

# Text Detection Service
VISION_API_KEY=your-google-api-key
VISION_TIMEOUT_SECONDS={default_settings.vision.timeout_seconds}
VISION_USE_MOCK={'true' if env == Environment.DEVELOPMENT else 'false'}

# Image Compression
PREPROCESS_MAX_SIZE_MB={default_settings.preprocess.max_size_mb}
PREPROCESS_MAX_WIDTH_OR_HEIGHT={default_settings.preprocess.max_width_or_height}

# Menu Descriptions
MENU_CSV_PATH={default_settings.menu.csv_path}
MENU_FALLBACK_DESCRIPTION={default_settings.menu.fallback_description}

# Overlay Geometry
OVERLAY_STRATEGY={default_settings.overlay.strategy.value}
OVERLAY_NORMALIZE_CORNERS=false

# Security Configuration
SECURITY_CORS_ORIGINS=*
"""

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(sample_content)

        return output_path


def load_config_for_environment(environment: Optional[str] = None) -> Settings:
    """Convenience function to load configuration for an environment"""
    return ConfigLoader.load_environment_config(environment)
