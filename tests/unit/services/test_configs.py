"""
Unit tests for services.configs module.
"""

from pathlib import Path

import pytest

from relayreader.core.exceptions import ConfigurationError
from relayreader.services.configs import ReaderConfig


class TestReaderConfigDefaults:
    """Default values."""

    def test_defaults(self):
        """Defaults target long-form articles on a public relay."""
        config = ReaderConfig()
        assert config.relay_url == "wss://relay.damus.io"
        assert config.kind == 30023
        assert config.limit == 20
        assert config.tag_name is None
        assert config.tag_value is None
        assert config.proxy_url is None
        assert config.connect_timeout is None
        assert config.close_timeout == 5.0
        assert config.wait == 30.0


class TestReaderConfigValidation:
    """Field validation."""

    def test_url_stripped(self):
        """The relay URL is stripped."""
        assert ReaderConfig(relay_url="  wss://a.example  ").relay_url == "wss://a.example"

    def test_blank_optionals_become_none(self):
        """Blank optional strings are normalized to None."""
        config = ReaderConfig(tag_name="  ", tag_value="", proxy_url=" ")
        assert config.tag_name is None
        assert config.tag_value is None
        assert config.proxy_url is None

    def test_tag_values_stripped(self):
        """Optional strings are stripped."""
        config = ReaderConfig(tag_name=" t ", tag_value=" nostr ")
        assert (config.tag_name, config.tag_value) == ("t", "nostr")

    @pytest.mark.parametrize(
        "data",
        [
            {"kind": -1},
            {"limit": 0},
            {"limit": 5001},
            {"wait": 0},
            {"close_timeout": 0},
            {"connect_timeout": -1.0},
        ],
    )
    def test_out_of_range(self, data):
        """Out-of-range values raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="invalid reader config"):
            ReaderConfig.from_dict(data)

    def test_large_kind(self):
        """Kinds above 65535 are valid configuration."""
        assert ReaderConfig.from_dict({"kind": 70000}).kind == 70000

    def test_from_dict(self):
        """Valid dictionaries are accepted."""
        config = ReaderConfig.from_dict({"kind": 1, "limit": 5, "connect_timeout": 10})
        assert (config.kind, config.limit, config.connect_timeout) == (1, 5, 10.0)


class TestReaderConfigFromYaml:
    """ReaderConfig.from_yaml()."""

    def test_load(self, tmp_path):
        """Values are read from the file."""
        path = tmp_path / "reader.yaml"
        path.write_text("relay_url: ws://localhost:7777\nkind: 1\ntag_name: t\n", encoding="utf-8")
        config = ReaderConfig.from_yaml(path)
        assert config.relay_url == "ws://localhost:7777"
        assert config.kind == 1
        assert config.tag_name == "t"

    def test_missing_file(self, tmp_path):
        """A missing file raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="not found"):
            ReaderConfig.from_yaml(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Broken YAML raises ConfigurationError."""
        path = tmp_path / "bad.yaml"
        path.write_text("kind: [1\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            ReaderConfig.from_yaml(path)

    def test_non_mapping(self, tmp_path):
        """A list document raises ConfigurationError."""
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="mapping"):
            ReaderConfig.from_yaml(path)

    def test_invalid_value(self, tmp_path):
        """Validation errors are wrapped too."""
        path = tmp_path / "reader.yaml"
        path.write_text("limit: 0\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            ReaderConfig.from_yaml(path)

    def test_shipped_example(self):
        """The example config in the repository is valid."""
        path = Path(__file__).parents[3] / "config" / "reader.yaml"
        config = ReaderConfig.from_yaml(path)
        assert config.kind == 30023
