from __future__ import annotations

from pathlib import Path

import pytest

from etherpad_lite import ClientConfig, InvalidArgument
from etherpad_lite.config import DEFAULT_TIMEOUT


def test_from_url_splits_components():
    config = ClientConfig.from_url("key", "http://pads.example.org:9001/api")

    assert (config.host, config.port, config.base_path) == ("pads.example.org", 9001, "/api")
    assert config.api_version == "1"
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.url == "http://pads.example.org:9001/api"


def test_default_ports_follow_scheme():
    assert ClientConfig.from_url("key", "http://pads.example.org/api").port == 80
    assert ClientConfig.from_url("key", "https://pads.example.org/api").port == 443


def test_config_is_immutable():
    config = ClientConfig.from_url("key")
    with pytest.raises(AttributeError):
        config.api_key = "other"  # type: ignore[misc]


def test_api_key_file(tmp_path: Path):
    key_file = tmp_path / "APIKEY.txt"
    key_file.write_text("from-file\n", encoding="utf-8")

    assert ClientConfig.from_url(key_file).api_key == "from-file"


def test_missing_api_key_file(tmp_path: Path):
    with pytest.raises(InvalidArgument):
        ClientConfig.from_url(tmp_path / "missing.txt")


def test_from_env():
    config = ClientConfig.from_env(
        {
            "ETHERPAD_API_KEY": "env-key",
            "ETHERPAD_URL": "https://pads.example.org/api",
            "ETHERPAD_CA_PATH": "/certs",
            "ETHERPAD_TIMEOUT": "3",
        }
    )

    assert config.api_key == "env-key"
    assert config.secure
    assert config.ca_path == "/certs"
    assert config.timeout == 3.0


def test_from_env_reads_key_file(tmp_path: Path):
    key_file = tmp_path / "key"
    key_file.write_text("file-key", encoding="utf-8")

    config = ClientConfig.from_env({"ETHERPAD_API_KEY_FILE": str(key_file)})

    assert config.api_key == "file-key"
    assert config.url == "http://localhost:9001/api"


@pytest.mark.parametrize(
    "environ",
    [{}, {"ETHERPAD_API_KEY": "k", "ETHERPAD_TIMEOUT": "soon"}],
)
def test_from_env_rejects_bad_values(environ):
    with pytest.raises(InvalidArgument):
        ClientConfig.from_env(environ)


def test_port_validation():
    with pytest.raises(InvalidArgument):
        ClientConfig(api_key="k", host="localhost", port=0)
