from __future__ import annotations

import io
import os
from pathlib import Path
from typing import Callable, Iterator, Sequence

import pytest
from rich.console import Console

from seasnake_setup.config import SetupConfig
from seasnake_setup.context import SetupContext
from seasnake_setup.reporter import StatusPrinter
from seasnake_setup.runner import CommandResult

Handler = Callable[[list[str]], CommandResult]

DESCRIPTOR_WITH_ADAPTERREMOVAL = """\
name: Hissss
channels:
  - conda-forge
  - bioconda
dependencies:
  - python=3.9
  - fastqc
  # trimming
  - adapterremoval=2.3.1
  - samtools
"""


class FakeRunner:
    """Records every command and answers through *handler* (default: exit 0)."""

    def __init__(self, handler: Handler | None = None):
        self.handler = handler
        self.calls: list[list[str]] = []

    def run(self, args: Sequence[str], **kwargs) -> CommandResult:
        cmd = [str(arg) for arg in args]
        self.calls.append(cmd)
        if self.handler is None:
            return CommandResult(0)
        return self.handler(cmd)

    def called(self, *needle: str) -> list[list[str]]:
        """Return calls containing every token in *needle*."""
        return [call for call in self.calls if all(token in call for token in needle)]


class Answers:
    """Scripted stdin for ``confirm``."""

    def __init__(self, *answers: str):
        self.pending = list(answers)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.pending:
            raise EOFError
        return self.pending.pop(0)


class FakeWorld:
    """Simulates git, the Miniforge installer, conda and mamba on disk."""

    def __init__(self, config: SetupConfig, descriptor: str | None = DESCRIPTOR_WITH_ADAPTERREMOVAL):
        self.config = config
        self.descriptor = descriptor
        self.installed: set[str] = set()
        self.failing: set[str] = set()
        self.fail_clone = False

    def _env_dir(self) -> Path:
        return self.config.miniforge_dir / "envs" / self.config.env_name

    def __call__(self, cmd: list[str]) -> CommandResult:
        if cmd[-1] == "--version" and cmd[0].endswith("git"):
            return CommandResult(0, stdout="git version 2.44.0\n")
        if "clone" in cmd:
            if self.fail_clone:
                return CommandResult(128, stderr="fatal: repository not found")
            clone_dir = Path(cmd[-1])
            (clone_dir / ".git").mkdir(parents=True, exist_ok=True)
            if self.descriptor is not None:
                self.config.descriptor.parent.mkdir(parents=True, exist_ok=True)
                self.config.descriptor.write_text(self.descriptor, encoding="utf-8")
            return CommandResult(0)
        if cmd[0] == "bash":
            _touch_executable(self.config.conda_bin)
            return CommandResult(0)
        if cmd[:2] == [str(self.config.conda_bin), "install"] and "mamba" in cmd:
            _touch_executable(self.config.mamba_bin)
            return CommandResult(0)
        if "create" in cmd:
            (self._env_dir() / "conda-meta").mkdir(parents=True, exist_ok=True)
            return CommandResult(0)
        if cmd[:2] == [str(self.config.conda_bin), "list"]:
            package = cmd[cmd.index("--full-name") + 1]
            if package in self.installed:
                return CommandResult(0, stdout=f'[{{"name": "{package}", "version": "1.0"}}]')
            return CommandResult(0, stdout="[]")
        if cmd[:2] == [str(self.config.mamba_bin), "install"]:
            package = cmd[-1]
            if package in self.failing:
                return CommandResult(1, stderr=f"PackagesNotFoundError: {package}")
            self.installed.add(package)
            return CommandResult(0)
        if "run" in cmd:
            return CommandResult(0, stdout="FastQC v0.12.1\n")
        return CommandResult(0)


def _touch_executable(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n", encoding="utf-8")
    path.chmod(0o755)


@pytest.fixture()
def bin_dir(tmp_path: Path) -> Path:
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture()
def install_tool(bin_dir: Path) -> Callable[[str], Path]:
    """Drop an executable named *name* onto the test PATH."""

    def _install(name: str) -> Path:
        tool = bin_dir / name
        _touch_executable(tool)
        return tool

    return _install


@pytest.fixture()
def setup_config(tmp_path: Path) -> SetupConfig:
    return SetupConfig(
        clone_dir=tmp_path / "Desktop" / "SEAsnake",
        miniforge_dir=tmp_path / "miniforge3",
        activation_script=tmp_path / "activate_seasnake.sh",
    )


@pytest.fixture()
def console() -> Console:
    return Console(file=io.StringIO(), width=200, force_terminal=False, color_system=None)


@pytest.fixture()
def make_ctx(tmp_path: Path, bin_dir: Path, setup_config: SetupConfig, console: Console):
    def _make(
        runner=None,
        answers: Answers | None = None,
        os_family: str = "darwin",
        machine: str = "arm64",
        config: SetupConfig | None = None,
    ) -> SetupContext:
        return SetupContext(
            config=config or setup_config,
            env={"PATH": str(bin_dir), "HOME": str(tmp_path)},
            cwd=tmp_path,
            runner=runner or FakeRunner(),
            printer=StatusPrinter(console),
            read=answers or Answers(),
            os_family=os_family,
            machine=machine,
        )

    return _make


@pytest.fixture()
def fake_world(setup_config: SetupConfig) -> FakeWorld:
    return FakeWorld(setup_config)


@pytest.fixture()
def answers() -> type[Answers]:
    return Answers


@pytest.fixture()
def fake_runner() -> type[FakeRunner]:
    return FakeRunner


@pytest.fixture()
def stub_download(monkeypatch: pytest.MonkeyPatch) -> Iterator[list[str]]:
    """Replace the installer download with a local write; yields requested URLs."""
    urls: list[str] = []

    def _download(url: str, dest: Path, client=None, console=None) -> Path:
        urls.append(url)
        dest.write_text("#!/bin/bash\n", encoding="utf-8")
        return dest

    monkeypatch.setattr("seasnake_setup.steps.conda.download_installer", _download)
    yield urls


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("SEASNAKE_SETUP_CONFIG", raising=False)
    monkeypatch.setattr(
        "seasnake_setup.config.user_config_dir",
        lambda appname: os.fspath(tmp_path / "user-config" / appname),
    )
