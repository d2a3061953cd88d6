"""
Configuration settings for the Image Resizer.
"""

import os
import json
from functools import lru_cache
from typing import Dict, Any, Literal

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from image_resizer.core.exceptions import ConfigurationError
from image_resizer.models import SizeSpec

DEFAULT_CONSTANTS_FILE = os.path.join(os.path.dirname(__file__), "constants.json")


def load_constants() -> Dict[str, Any]:
    """
    Load the packaged resize constants (marker and target sizes).

    The file location can be overridden with the IMAGE_CONSTANTS_FILE
    environment variable.

    Returns:
        Parsed constants dictionary

    Raises:
        ConfigurationError: If the file is missing or is not valid JSON
    """
    path = os.getenv("IMAGE_CONSTANTS_FILE", DEFAULT_CONSTANTS_FILE)
    try:
        with open(path, "r") as f:
            return json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Constants file not found: {path}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in constants file {path}: {str(e)}")


class Settings(BaseSettings):
    PROJECT_NAME: str = "Image Resizer"

    # GCP settings
    GCP_PROJECT_ID: str = ""
    GCP_SERVICE_ACCOUNT_JSON: str = ""

    # Development mode stores objects on the local filesystem
    DEV_MODE: bool = False
    LOCAL_STORAGE_DIR: str = "storage"

    # Empty means stdout only
    LOG_DIR: str = ""

    # Resize settings
    ORIGINAL_IMAGE_IDENTIFIER: str = Field(
        default_factory=lambda: load_constants()["ORIGINAL_IMAGE_IDENTIFIER"], validate_default=True
    )
    IMAGE_SIZES: Dict[str, SizeSpec] = Field(
        default_factory=lambda: load_constants()["IMAGE_SIZES"], validate_default=True
    )
    RESIZE_FIT: Literal["cover", "fill", "contain"] = "cover"
    JPEG_QUALITY: int = Field(default=80, ge=1, le=95)

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra="ignore")

    @field_validator("ORIGINAL_IMAGE_IDENTIFIER")
    @classmethod
    def identifier_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("ORIGINAL_IMAGE_IDENTIFIER must not be empty")
        return value

    @field_validator("IMAGE_SIZES")
    @classmethod
    def size_names_valid(cls, value: Dict[str, SizeSpec]) -> Dict[str, SizeSpec]:
        for size_name in value:
            if not size_name or "/" in size_name:
                raise ValueError(f"Invalid size name: {size_name!r}")
        return value

    @model_validator(mode="after")
    def sizes_never_look_original(self) -> "Settings":
        # A derived name must never end with the marker, or it would be resized again
        for size_name in self.IMAGE_SIZES:
            suffix = f"_{size_name}"
            if suffix.endswith(self.ORIGINAL_IMAGE_IDENTIFIER) or self.ORIGINAL_IMAGE_IDENTIFIER.endswith(suffix):
                raise ValueError(
                    f"Size name {size_name!r} clashes with marker {self.ORIGINAL_IMAGE_IDENTIFIER!r}"
                )
        return self

    @property
    def GCP_SERVICE_ACCOUNT_INFO(self) -> Dict[str, Any]:
        """Load service account info from the JSON string setting"""
        if not self.GCP_SERVICE_ACCOUNT_JSON:
            return {}
        try:
            return json.loads(self.GCP_SERVICE_ACCOUNT_JSON)
        except json.JSONDecodeError:
            # Return empty dict if JSON is invalid
            return {}


@lru_cache()
def get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}")
