"""Setup configuration.

Defaults reproduce the stock SEAsnake installation on an M-series Mac.
Any field can be overridden from a YAML file, resolved in this order:

1. An explicit path (the ``--config`` CLI option)
2. The ``SEASNAKE_SETUP_CONFIG`` environment variable
3. ``config.yaml`` in the platformdirs user config directory
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

from platformdirs import user_config_dir
from ruamel.yaml import YAML

logger = logging.getLogger(__name__)

DEFAULT_PACKAGES: tuple[str, ...] = (
    "fastqc",
    "bcftools",
    "samtools",
    "bwa",
    "bedtools",
    "subread",
    "star",
    "picard",
    "snakemake-minimal",
    "pysam",
    "cutadapt",
    "jinja2",
    "networkx",
    "graphviz",
    "matplotlib",
)

# Highest priority first, as passed to ``-c``.
DEFAULT_CHANNELS: tuple[str, ...] = ("conda-forge", "bioconda", "defaults")

_PATH_FIELDS = ("clone_dir", "miniforge_dir", "activation_script")


class SetupConfigError(RuntimeError):
    """Raised when the setup configuration file cannot be parsed or validated."""


@dataclass(frozen=True)
class SetupConfig:
    """Everything the provisioning steps need to know about the target layout."""

    repo_url: str = "https://github.com/BIGslu/SEAsnake"
    clone_dir: Path = field(default_factory=lambda: Path.home() / "Desktop" / "SEAsnake")
    miniforge_dir: Path = field(default_factory=lambda: Path.home() / "miniforge3")
    env_name: str = "SEAsnake"
    descriptor_path: str = "environment/Hissss_env.yaml"
    python_version: str = "3.9"
    packages: tuple[str, ...] = DEFAULT_PACKAGES
    channels: tuple[str, ...] = DEFAULT_CHANNELS
    expected_os: str = "darwin"
    expected_arch: str = "arm64"
    verify_tool: str = "fastqc"
    activation_script: Path = field(default_factory=lambda: Path.home() / "activate_seasnake.sh")
    installer_base_url: str = "https://github.com/conda-forge/miniforge/releases/latest/download"

    @property
    def descriptor(self) -> Path:
        return self.clone_dir / self.descriptor_path

    @property
    def conda_bin(self) -> Path:
        return self.miniforge_dir / "bin" / "conda"

    @property
    def mamba_bin(self) -> Path:
        return self.miniforge_dir / "bin" / "mamba"


def default_config_path() -> Path:
    """Return the config file location, honouring ``SEASNAKE_SETUP_CONFIG``."""
    if env_path := os.environ.get("SEASNAKE_SETUP_CONFIG"):
        return Path(env_path).expanduser()
    return Path(user_config_dir("seasnake-setup")) / "config.yaml"


def _coerce(name: str, value: object) -> object:
    if name in _PATH_FIELDS:
        if not isinstance(value, str):
            raise SetupConfigError(f"Invalid {name} in config: expected a path string")
        return Path(value).expanduser()
    if name in ("packages", "channels"):
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise SetupConfigError(f"Invalid {name} in config: expected a list of strings")
        return tuple(value)
    if not isinstance(value, str):
        raise SetupConfigError(f"Invalid {name} in config: expected a string")
    return value


def load_config(path: Path | None = None) -> SetupConfig:
    """Load the setup configuration, falling back to defaults.

    An explicitly requested file must exist; the default location is optional.

    Raises:
        SetupConfigError: If the file is missing (explicit path only), is not
            valid YAML, or contains unknown keys or values of the wrong type.
    """
    explicit = path is not None or bool(os.environ.get("SEASNAKE_SETUP_CONFIG"))
    config_file = path.expanduser() if path is not None else default_config_path()

    if not config_file.exists():
        if explicit:
            raise SetupConfigError(f"Config file not found: {config_file}")
        logger.debug("No config file at %s, using defaults", config_file)
        return SetupConfig()

    yaml = YAML(typ="safe")
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.load(f) or {}
    except Exception as exc:
        logger.error("Failed to load config: %s", exc)
        raise SetupConfigError(f"Invalid YAML in {config_file}: {exc}") from exc

    if not isinstance(data, dict):
        raise SetupConfigError(f"Invalid config in {config_file}: expected a mapping at top level")

    known = {f.name for f in fields(SetupConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise SetupConfigError(
            f"Unknown key(s) in {config_file}: {', '.join(unknown)}. "
            f"Valid keys: {', '.join(sorted(known))}"
        )

    overrides = {name: _coerce(name, value) for name, value in data.items()}
    logger.info("Loaded setup config from %s", config_file)
    return replace(SetupConfig(), **overrides)


__all__ = [
    "DEFAULT_CHANNELS",
    "DEFAULT_PACKAGES",
    "SetupConfig",
    "SetupConfigError",
    "default_config_path",
    "load_config",
]
