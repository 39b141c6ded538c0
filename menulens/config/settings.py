"""
Configuration management system using Pydantic Settings.
Supports environment-based configuration for different deployment environments.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode
from typing import Annotated, Optional, Dict, Any, List
from enum import Enum
from pathlib import Path


class Environment(str, Enum):
    """Supported deployment environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Supported log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class RenderStrategy(str, Enum):
    """How overlay rectangles relate to the displayed image"""
    NATURAL = "natural"  # image at intrinsic size, container carries pan/zoom
    SCALED = "scaled"    # image CSS-fit, rectangles multiplied by rendered/natural


class VisionSettings(BaseSettings):
    """Cloud text-detection service configuration"""

    api_url: str = Field(default="https://vision.googleapis.com/v1/images:annotate")
    api_key: Optional[str] = Field(default=None, description="Google API key")
    access_token: Optional[str] = Field(
        default=None,
        description="OAuth bearer token, used when no API key is set"
    )
    feature_type: str = Field(default="TEXT_DETECTION")
    timeout_seconds: int = Field(default=30, ge=1, le=300)
    use_mock: bool = Field(default=False)

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key or self.access_token)

    model_config = {
        "env_prefix": "VISION_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class PreprocessSettings(BaseSettings):
    """Image compression limits applied before recognition"""

    max_size_mb: float = Field(default=1.0, gt=0.0, le=20.0)
    max_width_or_height: int = Field(default=1024, ge=32, le=8192)
    initial_quality: int = Field(default=90, ge=10, le=100)
    min_quality: int = Field(default=30, ge=5, le=100)
    max_upload_mb: int = Field(default=20, ge=1, le=100)

    model_config = {
        "env_prefix": "PREPROCESS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class MenuSettings(BaseSettings):
    """Menu description table configuration"""

    csv_path: str = Field(default="data/menu_descriptions.csv")
    fallback_description: str = Field(default="description not found")

    model_config = {
        "env_prefix": "MENU_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class OverlaySettings(BaseSettings):
    """Hit-target geometry configuration"""

    strategy: RenderStrategy = Field(default=RenderStrategy.NATURAL)
    normalize_corners: bool = Field(default=False)

    @field_validator('strategy', mode='before')
    @classmethod
    def parse_strategy(cls, v):
        """Accept strategy names in any case"""
        if isinstance(v, str):
            return RenderStrategy(v.lower())
        return v

    model_config = {
        "env_prefix": "OVERLAY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class SecuritySettings(BaseSettings):
    """CORS configuration"""

    cors_origins: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE"]
    )
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from environment variable or list"""
        if isinstance(v, str):
            origin_list = v.split(",")
            return [origin.strip() for origin in origin_list if origin.strip()]
        return v or ["*"]

    model_config = {
        "env_prefix": "SECURITY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class Settings(BaseSettings):
    """Main application settings"""

    # Application Configuration
    app_name: str = Field(default="MenuLens")
    app_version: str = Field(default="1.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)

    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = Field(default=False)
    workers: int = Field(default=1, ge=1, le=16)
    max_sessions: int = Field(default=1000, ge=1, description="Viewer sessions kept in memory")

    # Logging Configuration
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    log_file: Optional[str] = Field(default=None)
    log_json: bool = Field(default=True, description="Emit JSON log lines instead of log_format")

    # Nested Settings
    vision: VisionSettings = Field(default_factory=VisionSettings)
    preprocess: PreprocessSettings = Field(default_factory=PreprocessSettings)
    menu: MenuSettings = Field(default_factory=MenuSettings)
    overlay: OverlaySettings = Field(default_factory=OverlaySettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment setting"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    def get_menu_csv_path(self) -> Path:
        """Get absolute path of the menu description table"""
        return Path(self.menu.csv_path).resolve()

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def get_cors_config(self) -> Dict[str, Any]:
        """Get CORS configuration for FastAPI"""
        return {
            "allow_origins": self.security.cors_origins,
            "allow_credentials": self.security.cors_allow_credentials,
            "allow_methods": self.security.cors_allow_methods,
            "allow_headers": self.security.cors_allow_headers,
        }

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings instance"""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment and files"""
    global settings
    settings = Settings()
    return settings
