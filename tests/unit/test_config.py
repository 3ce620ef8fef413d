"""Tests for seasnake_setup.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from seasnake_setup.config import (
    DEFAULT_PACKAGES,
    SetupConfig,
    SetupConfigError,
    default_config_path,
    load_config,
)


class TestDefaults:
    def test_stock_layout(self) -> None:
        config = SetupConfig()
        assert config.clone_dir == Path.home() / "Desktop" / "SEAsnake"
        assert config.miniforge_dir == Path.home() / "miniforge3"
        assert config.env_name == "SEAsnake"
        assert config.activation_script == Path.home() / "activate_seasnake.sh"
        assert config.expected_os == "darwin"
        assert config.expected_arch == "arm64"

    def test_fifteen_fallback_packages(self) -> None:
        assert len(DEFAULT_PACKAGES) == 15
        assert DEFAULT_PACKAGES[0] == "fastqc"
        assert "snakemake-minimal" in DEFAULT_PACKAGES

    def test_derived_paths(self, setup_config: SetupConfig) -> None:
        assert setup_config.descriptor == setup_config.clone_dir / "environment" / "Hissss_env.yaml"
        assert setup_config.conda_bin == setup_config.miniforge_dir / "bin" / "conda"
        assert setup_config.mamba_bin == setup_config.miniforge_dir / "bin" / "mamba"


class TestConfigPath:
    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEASNAKE_SETUP_CONFIG", str(tmp_path / "custom.yaml"))
        assert default_config_path() == tmp_path / "custom.yaml"

    def test_user_config_dir(self, tmp_path: Path) -> None:
        assert default_config_path() == tmp_path / "user-config" / "seasnake-setup" / "config.yaml"


class TestLoadConfig:
    def test_missing_default_file_gives_defaults(self) -> None:
        assert load_config() == SetupConfig()

    def test_missing_explicit_file_is_an_error(self, tmp_path: Path) -> None:
        with pytest.raises(SetupConfigError, match="not found"):
            load_config(tmp_path / "nope.yaml")

    def test_missing_env_file_is_an_error(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEASNAKE_SETUP_CONFIG", str(tmp_path / "nope.yaml"))
        with pytest.raises(SetupConfigError, match="not found"):
            load_config()

    def test_empty_env_var_falls_back_to_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEASNAKE_SETUP_CONFIG", "")
        assert load_config() == SetupConfig()

    def test_overrides(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "env_name: seasnake-dev\n"
            "clone_dir: ~/src/SEAsnake\n"
            "packages:\n"
            "  - fastqc\n"
            "  - samtools\n"
            "channels: bioconda\n",
            encoding="utf-8",
        )
        config = load_config(config_file)

        assert config.env_name == "seasnake-dev"
        assert config.clone_dir == Path.home() / "src" / "SEAsnake"
        assert config.packages == ("fastqc", "samtools")
        assert config.channels == ("bioconda",)
        assert config.miniforge_dir == SetupConfig().miniforge_dir

    def test_default_location_is_read(self, tmp_path: Path) -> None:
        config_file = default_config_path()
        config_file.parent.mkdir(parents=True)
        config_file.write_text("verify_tool: samtools\n", encoding="utf-8")
        assert load_config().verify_tool == "samtools"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("", encoding="utf-8")
        assert load_config(config_file) == SetupConfig()

    def test_unknown_key(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("colour: blue\n", encoding="utf-8")
        with pytest.raises(SetupConfigError, match="Unknown key"):
            load_config(config_file)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("env_name: [unclosed\n", encoding="utf-8")
        with pytest.raises(SetupConfigError, match="Invalid YAML"):
            load_config(config_file)

    def test_top_level_must_be_mapping(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(SetupConfigError, match="mapping"):
            load_config(config_file)

    @pytest.mark.parametrize(
        "content",
        ["env_name: 3\n", "packages: {a: 1}\n", "clone_dir: [1]\n", "packages: [1, 2]\n"],
    )
    def test_wrong_types(self, tmp_path: Path, content: str) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text(content, encoding="utf-8")
        with pytest.raises(SetupConfigError, match="Invalid"):
            load_config(config_file)
