"""
tests/test_config.py - configuration loading tests
"""

from pathlib import Path

import pytest

from ec2ssh.adapters.config import ConfigLoader, Settings
from ec2ssh.core.constants import DEFAULT_SSH_USER, DEFAULT_STORE_FILE
from ec2ssh.core.exceptions import ConfigError


@pytest.fixture
def config_file(tmp_path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(
        'regions = ["eu-west-1", "us-east-1"]\n'
        'roles = ["arn:aws:iam::123456789012:role/readonly"]\n'
        'default_user = "ubuntu"\n'
        'max_workers = 4\n'
    )
    return path


class TestConfigLoader:
    """ConfigLoader priority handling"""

    def test_defaults_without_config(self, tmp_path):
        loader = ConfigLoader(environ={"EC2SSH_CONFIG": str(tmp_path / "missing.toml")})

        settings = loader.load()

        assert settings == Settings()
        assert settings.store_path == DEFAULT_STORE_FILE
        assert settings.default_user == DEFAULT_SSH_USER

    def test_toml_values(self, config_file):
        settings = ConfigLoader(environ={}).load(toml_path=config_file)

        assert settings.regions == ["eu-west-1", "us-east-1"]
        assert settings.roles == ["arn:aws:iam::123456789012:role/readonly"]
        assert settings.default_user == "ubuntu"
        assert settings.max_workers == 4

    def test_config_path_from_env(self, config_file):
        settings = ConfigLoader(environ={"EC2SSH_CONFIG": str(config_file)}).load()

        assert settings.regions == ["eu-west-1", "us-east-1"]

    def test_env_overrides_toml(self, config_file):
        environ = {"EC2SSH_REGIONS": "ap-northeast-2, ap-southeast-1", "EC2SSH_MAX_WORKERS": "2"}

        settings = ConfigLoader(environ=environ).load(toml_path=config_file)

        assert settings.regions == ["ap-northeast-2", "ap-southeast-1"]
        assert settings.max_workers == 2
        assert settings.default_user == "ubuntu"

    def test_cli_overrides_env(self, config_file, tmp_path):
        environ = {"EC2SSH_STORE": str(tmp_path / "env.json")}

        settings = ConfigLoader(environ=environ).load(
            toml_path=config_file,
            cli_overrides={"store_path": str(tmp_path / "cli.json"), "default_key": None},
        )

        assert settings.store_path == tmp_path / "cli.json"
        assert settings.default_key == Settings().default_key

    def test_explicit_missing_file_is_error(self, tmp_path):
        with pytest.raises(ConfigError):
            ConfigLoader(environ={}).load(toml_path=tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("regions = [")

        with pytest.raises(ConfigError):
            ConfigLoader(environ={}).load(toml_path=path)

    @pytest.mark.parametrize("content", ['regions = "eu-west-1"\nmax_workers = "many"', "regions = [1, 2]", "max_workers = 0"])
    def test_invalid_values(self, tmp_path, content):
        path = tmp_path / "config.toml"
        path.write_text(content)

        with pytest.raises(ConfigError):
            ConfigLoader(environ={}).load(toml_path=path)
