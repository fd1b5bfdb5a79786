"""Tests for validator configuration."""

import json

import pytest
import yaml

from dataknobs_validator import ConfigurationError, Validator, ValidatorConfig


class TestValidatorConfig:
    """Test ValidatorConfig construction."""

    def test_defaults(self):
        """Test default settings."""
        config = ValidatorConfig()
        assert config.tag == "validate"
        assert config.check_types is True

    def test_from_dict(self):
        """Test building from a dictionary."""
        config = ValidatorConfig.from_dict({"tag": "rule", "check_types": False})
        assert config == ValidatorConfig(tag="rule", check_types=False)

    def test_from_empty_dict(self):
        """Test that missing keys take defaults."""
        assert ValidatorConfig.from_dict({}) == ValidatorConfig()

    def test_to_dict_round_trip(self):
        """Test conversion back to a dictionary."""
        config = ValidatorConfig(tag="rule")
        assert config.to_dict() == {"tag": "rule", "check_types": True}
        assert ValidatorConfig.from_dict(config.to_dict()) == config

    def test_unknown_keys(self):
        """Test that unknown keys are rejected."""
        with pytest.raises(ConfigurationError) as exc_info:
            ValidatorConfig.from_dict({"tag": "validate", "strict": True})
        assert exc_info.value.context["unknown"] == ["strict"]

    @pytest.mark.parametrize("tag", ["", None, 3])
    def test_invalid_tag(self, tag):
        """Test that the tag must be a non-empty string."""
        with pytest.raises(ConfigurationError):
            ValidatorConfig(tag=tag)

    def test_invalid_check_types(self):
        """Test that check_types must be a boolean."""
        with pytest.raises(ConfigurationError):
            ValidatorConfig.from_dict({"check_types": "yes"})

    def test_non_mapping(self):
        """Test that configuration data must be a mapping."""
        with pytest.raises(ConfigurationError):
            ValidatorConfig.from_dict(["tag"])


class TestConfigFiles:
    """Test loading configuration files."""

    def test_yaml(self, tmp_path):
        """Test loading YAML."""
        path = tmp_path / "validator.yaml"
        path.write_text(yaml.safe_dump({"tag": "rule", "check_types": False}))

        config = ValidatorConfig.from_file(path)
        assert config == ValidatorConfig(tag="rule", check_types=False)

    def test_yml_extension(self, tmp_path):
        """Test the short YAML extension."""
        path = tmp_path / "validator.yml"
        path.write_text("tag: rule\n")
        assert ValidatorConfig.from_file(str(path)).tag == "rule"

    def test_empty_yaml(self, tmp_path):
        """Test that an empty file gives defaults."""
        path = tmp_path / "validator.yaml"
        path.write_text("")
        assert ValidatorConfig.from_file(path) == ValidatorConfig()

    def test_json(self, tmp_path):
        """Test loading JSON."""
        path = tmp_path / "validator.json"
        path.write_text(json.dumps({"check_types": False}))
        assert ValidatorConfig.from_file(path).check_types is False

    def test_missing_file(self, tmp_path):
        """Test a missing file."""
        with pytest.raises(ConfigurationError):
            ValidatorConfig.from_file(tmp_path / "missing.yaml")

    def test_unsupported_format(self, tmp_path):
        """Test an unsupported extension."""
        path = tmp_path / "validator.toml"
        path.write_text("tag = 'rule'\n")
        with pytest.raises(ConfigurationError) as exc_info:
            ValidatorConfig.from_file(path)
        assert "Unsupported file format" in str(exc_info.value)

    def test_invalid_yaml(self, tmp_path):
        """Test a file that does not parse."""
        path = tmp_path / "validator.yaml"
        path.write_text("tag: [unclosed\n")
        with pytest.raises(ConfigurationError):
            ValidatorConfig.from_file(path)

    def test_validator_uses_config_tag(self, tmp_path):
        """Test that a loaded config drives the validator's registry."""
        path = tmp_path / "validator.yaml"
        path.write_text("tag: rule\n")
        validator = Validator(ValidatorConfig.from_file(path))
        assert validator.registry.tag == "rule"
