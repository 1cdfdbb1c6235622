"""Unit tests for configuration loading and overrides."""

import sys
from pathlib import Path

import pytest


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


@pytest.mark.core
@pytest.mark.tra("Config.Model")
@pytest.mark.tier(0)
class TestConfig:
    """Tests for the Config model."""

    def test_defaults(self) -> None:
        """Only api_token is required."""
        from bitcli.config import DEFAULT_MAX_CONCURRENT, Config

        config = Config(api_token="secret")

        assert str(config.api_url).startswith("https://api-ssl.bitly.com")
        assert config.domain is None
        assert config.default_group_guid is None
        assert config.cache_dir is None
        assert config.offline is False
        assert config.max_concurrent == DEFAULT_MAX_CONCURRENT
        assert config.caching_enabled

    def test_token_is_secret(self) -> None:
        """The token is not shown in reprs."""
        from bitcli.config import Config

        config = Config(api_token="secret")

        assert "secret" not in repr(config)
        assert config.api_token.get_secret_value() == "secret"

    def test_empty_token_rejected(self) -> None:
        """An empty token is invalid."""
        from pydantic import ValidationError

        from bitcli.config import Config

        with pytest.raises(ValidationError, match="api_token"):
            Config(api_token="")

    def test_invalid_max_concurrent_rejected(self) -> None:
        """max_concurrent must be positive."""
        from pydantic import ValidationError

        from bitcli.config import Config

        with pytest.raises(ValidationError):
            Config(api_token="secret", max_concurrent=0)

    def test_empty_cache_dir_disables_caching(self) -> None:
        """cache_dir = "" turns caching off."""
        from bitcli.config import Config

        assert not Config(api_token="secret", cache_dir="").caching_enabled

    def test_is_frozen(self) -> None:
        """Configs are immutable."""
        from pydantic import ValidationError

        from bitcli.config import Config

        config = Config(api_token="secret")
        with pytest.raises(ValidationError):
            config.offline = True  # type: ignore[misc]


@pytest.mark.core
@pytest.mark.tra("Config.Override")
@pytest.mark.tier(0)
class TestOverrideWith:
    """Tests for Config.override_with()."""

    def test_none_options_keep_values(self) -> None:
        """Unset options change nothing."""
        from bitcli.config import Config, Options

        config = Config(api_token="secret", domain="bit.ly")

        assert config.override_with(Options()) == config

    def test_options_override_values(self) -> None:
        """Set options replace configured values."""
        from bitcli.config import Config, Options

        config = Config(api_token="secret", domain="bit.ly", default_group_guid="Bg1")

        result = config.override_with(
            Options(
                domain="test.domain",
                group_guid="Bg2",
                cache_dir="",
                offline=True,
                max_concurrent=3,
            )
        )

        assert result.domain == "test.domain"
        assert result.default_group_guid == "Bg2"
        assert result.cache_dir == ""
        assert result.offline is True
        assert result.max_concurrent == 3
        assert result.api_token.get_secret_value() == "secret"
        assert result.api_url == config.api_url
        assert config.domain == "bit.ly"

    def test_invalid_override_raises_configuration_error(self) -> None:
        """Invalid overrides surface as ConfigurationError."""
        from bitcli.config import Config, Options
        from bitcli.core.exceptions import ConfigurationError

        with pytest.raises(ConfigurationError):
            Config(api_token="secret").override_with(Options(max_concurrent=0))


@pytest.mark.core
@pytest.mark.tra("Config.Load")
@pytest.mark.tier(1)
class TestLoadConfig:
    """Tests for load_config()."""

    def test_loads_values(self, tmp_path: Path) -> None:
        """Keys from the TOML file end up in the config."""
        from bitcli.config import load_config

        path = write(
            tmp_path / "config.toml",
            'api_token = "secret"\n'
            'api_url = "https://api.test"\n'
            'domain = "bit.ly"\n'
            'default_group_guid = "Bg1"\n'
            "max_concurrent = 4\n"
            "offline = true\n",
        )

        config = load_config(path)

        assert config.api_token.get_secret_value() == "secret"
        assert str(config.api_url).startswith("https://api.test")
        assert config.domain == "bit.ly"
        assert config.default_group_guid == "Bg1"
        assert config.max_concurrent == 4
        assert config.offline is True

    def test_unknown_keys_are_ignored(self, tmp_path: Path) -> None:
        """Extra keys do not fail validation."""
        from bitcli.config import load_config

        path = write(tmp_path / "config.toml", 'api_token = "secret"\ncolor = "blue"\n')

        assert load_config(path).api_token.get_secret_value() == "secret"

    def test_imports_override_main_file(self, tmp_path: Path) -> None:
        """Imported files are resolved relative to the config and win."""
        from bitcli.config import load_config

        write(tmp_path / "secrets.toml", 'api_token = "from-import"\n')
        write(tmp_path / "more" / "domain.toml", 'domain = "test.domain"\n')
        path = write(
            tmp_path / "config.toml",
            'import = ["secrets.toml", "more/domain.toml"]\n'
            'api_token = "main"\n'
            'domain = "bit.ly"\n',
        )

        config = load_config(path)

        assert config.api_token.get_secret_value() == "from-import"
        assert config.domain == "test.domain"

    def test_later_imports_win(self, tmp_path: Path) -> None:
        """Imports are applied in order."""
        from bitcli.config import load_config

        write(tmp_path / "a.toml", 'domain = "a.example"\n')
        write(tmp_path / "b.toml", 'domain = "b.example"\n')
        path = write(
            tmp_path / "config.toml",
            'import = ["a.toml", "b.toml"]\napi_token = "secret"\n',
        )

        assert load_config(path).domain == "b.example"

    def test_absolute_import(self, tmp_path: Path) -> None:
        """Absolute import paths are used as-is."""
        from bitcli.config import load_config

        secrets = write(tmp_path / "elsewhere" / "secrets.toml", 'api_token = "abs"\n')
        path = write(tmp_path / "conf" / "config.toml", f"import = [{str(secrets)!r}]\n")

        assert load_config(path).api_token.get_secret_value() == "abs"

    def test_missing_import_is_skipped(self, tmp_path: Path) -> None:
        """A missing import does not fail loading."""
        from bitcli.config import load_config

        path = write(
            tmp_path / "config.toml",
            'import = ["missing.toml"]\napi_token = "secret"\n',
        )

        assert load_config(path).api_token.get_secret_value() == "secret"

    def test_import_must_be_a_list(self, tmp_path: Path) -> None:
        """A scalar import value is a configuration error."""
        from bitcli.config import load_config
        from bitcli.core.exceptions import ConfigurationError

        path = write(
            tmp_path / "config.toml", 'import = "secrets.toml"\napi_token = "secret"\n'
        )

        with pytest.raises(ConfigurationError, match="import"):
            load_config(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing config file is a configuration error naming the file."""
        from bitcli.config import load_config
        from bitcli.core.exceptions import ConfigurationError

        path = tmp_path / "nope.toml"
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)
        assert exc_info.value.path == path

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Syntax errors are configuration errors."""
        from bitcli.config import load_config
        from bitcli.core.exceptions import ConfigurationError

        path = write(tmp_path / "config.toml", "api_token = \n")

        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            load_config(path)

    def test_missing_token(self, tmp_path: Path) -> None:
        """A config without api_token is invalid."""
        from bitcli.config import load_config
        from bitcli.core.exceptions import ConfigurationError

        path = write(tmp_path / "config.toml", 'domain = "bit.ly"\n')

        with pytest.raises(ConfigurationError, match="api_token"):
            load_config(path)


@pytest.mark.core
@pytest.mark.tra("Config.Dirs")
@pytest.mark.tier(0)
@pytest.mark.skipif(sys.platform != "linux", reason="XDG directories are Linux-only")
class TestDirectories:
    """Tests for platform directories."""

    def test_xdg_cache_home(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """XDG_CACHE_HOME is honoured on Linux."""
        from bitcli import config

        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))

        assert config.user_cache_dir() == tmp_path / "bitcli"

    def test_relative_xdg_is_ignored(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Relative XDG paths fall back to the home directory."""
        from bitcli import config

        monkeypatch.setenv("XDG_CONFIG_HOME", "relative/dir")
        monkeypatch.setenv("HOME", str(tmp_path))

        assert config.user_config_dir() == tmp_path / ".config" / "bitcli"

    def test_default_config_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The default config file lives in the config directory."""
        from bitcli import config

        monkeypatch.setattr(config, "user_config_dir", lambda: tmp_path)

        assert config.default_config_file() == tmp_path / "config.toml"


@pytest.mark.core
@pytest.mark.tra("Config.Dirs")
@pytest.mark.tier(0)
class TestOtherPlatformDirectories:
    """Tests for the non-XDG cache locations."""

    def test_windows_cache_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Windows caches live under %LOCALAPPDATA%\\bitcli\\Cache."""
        from bitcli import config

        monkeypatch.setattr(config.sys, "platform", "win32")
        monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))

        assert config.user_cache_dir() == tmp_path / "bitcli" / "Cache"

    def test_macos_cache_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """macOS caches live under ~/Library/Caches/bitcli."""
        from bitcli import config

        monkeypatch.setattr(config.sys, "platform", "darwin")
        monkeypatch.setattr(config.Path, "home", lambda: tmp_path)

        assert config.user_cache_dir() == tmp_path / "Library" / "Caches" / "bitcli"
