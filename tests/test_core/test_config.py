import json
import pytest
from pydantic import ValidationError

from image_resizer.config import Settings, get_settings, load_constants
from image_resizer.core.exceptions import ConfigurationError
from image_resizer.models import SizeSpec


def test_defaults_come_from_constants_file():
    """Test that the packaged constants provide the marker and sizes."""
    settings = Settings(_env_file=None)
    constants = load_constants()

    assert settings.ORIGINAL_IMAGE_IDENTIFIER == constants["ORIGINAL_IMAGE_IDENTIFIER"] == "_xoriginal"
    assert set(settings.IMAGE_SIZES) == set(constants["IMAGE_SIZES"])
    assert settings.IMAGE_SIZES["thumb"] == SizeSpec(width=100, height=100)
    assert settings.RESIZE_FIT == "cover"


def test_environment_overrides_sizes(monkeypatch):
    """Test IMAGE_SIZES as a JSON environment variable."""
    monkeypatch.setenv("IMAGE_SIZES", json.dumps({"avatar": {"width": 48, "height": 48}}))
    monkeypatch.setenv("ORIGINAL_IMAGE_IDENTIFIER", "_src")

    settings = get_settings()

    assert settings.IMAGE_SIZES == {"avatar": SizeSpec(width=48, height=48)}
    assert settings.ORIGINAL_IMAGE_IDENTIFIER == "_src"


def test_constants_file_override(monkeypatch, tmp_path):
    """Test loading constants from another file."""
    constants_file = tmp_path / "constants.json"
    constants_file.write_text(json.dumps({
        "ORIGINAL_IMAGE_IDENTIFIER": "-orig",
        "IMAGE_SIZES": {"hero": {"width": 1600, "height": 900}},
    }))
    monkeypatch.setenv("IMAGE_CONSTANTS_FILE", str(constants_file))

    settings = Settings(_env_file=None)

    assert settings.ORIGINAL_IMAGE_IDENTIFIER == "-orig"
    assert settings.IMAGE_SIZES == {"hero": SizeSpec(width=1600, height=900)}


def test_missing_constants_file(monkeypatch, tmp_path):
    """Test that a missing constants file is a configuration error."""
    monkeypatch.setenv("IMAGE_CONSTANTS_FILE", str(tmp_path / "missing.json"))

    with pytest.raises(ConfigurationError):
        load_constants()


def test_invalid_size_is_configuration_error(monkeypatch):
    """Test that non-positive dimensions are rejected."""
    monkeypatch.setenv("IMAGE_SIZES", json.dumps({"thumb": {"width": 0, "height": 100}}))

    with pytest.raises(ConfigurationError):
        get_settings()


def test_empty_identifier_rejected():
    """Test that an empty marker is rejected."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, ORIGINAL_IMAGE_IDENTIFIER="")


def test_size_name_with_slash_rejected():
    """Test that size names cannot introduce directories."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, IMAGE_SIZES={"a/b": {"width": 10, "height": 10}})


def test_size_name_clashing_with_marker_rejected():
    """Test that a size name whose output would look like an original is rejected."""
    with pytest.raises(ValidationError):
        Settings(
            _env_file=None,
            ORIGINAL_IMAGE_IDENTIFIER="_xoriginal",
            IMAGE_SIZES={"xoriginal": {"width": 10, "height": 10}},
        )


def test_service_account_info():
    """Test parsing the service account JSON setting."""
    settings = Settings(_env_file=None, GCP_SERVICE_ACCOUNT_JSON='{"project_id": "demo"}')
    assert settings.GCP_SERVICE_ACCOUNT_INFO == {"project_id": "demo"}

    assert Settings(_env_file=None, GCP_SERVICE_ACCOUNT_JSON="not json").GCP_SERVICE_ACCOUNT_INFO == {}
    assert Settings(_env_file=None).GCP_SERVICE_ACCOUNT_INFO == {}
