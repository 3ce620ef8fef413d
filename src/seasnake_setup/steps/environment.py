"""SEAsnake conda environment creation.

The environment is built from the pipeline's environment descriptor when
the checkout ships one. Otherwise a bare Python environment is created and
each package is installed by its own step, so one failing package never
blocks the rest.
"""

from __future__ import annotations

import json
import logging
import re

from ruamel.yaml import YAML

from seasnake_setup.context import SetupContext
from seasnake_setup.orchestrator import Severity, Step
from seasnake_setup.state import Failed, StepResult, Succeeded

logger = logging.getLogger(__name__)

# Descriptor dependencies with no osx-arm64 build, and their replacements.
ARM64_REPLACEMENTS: dict[str, str] = {
    "adapterremoval": "cutadapt >=5.0",
}


def descriptor_present(ctx: SetupContext) -> bool:
    return ctx.config.descriptor.is_file()


def environment_exists(ctx: SetupContext) -> bool:
    env_dir = ctx.config.miniforge_dir / "envs" / ctx.config.env_name
    return (env_dir / "conda-meta").is_dir()


def _yaml() -> YAML:
    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


def _replacement(dependency: object) -> str | None:
    if not isinstance(dependency, str):
        return None
    for name, replacement in ARM64_REPLACEMENTS.items():
        if re.match(rf"{re.escape(name)}\b", dependency.strip()):
            return replacement
    return None


def descriptor_fixed(ctx: SetupContext) -> bool:
    if not descriptor_present(ctx):
        return True
    data = _yaml().load(ctx.config.descriptor) or {}
    dependencies = data.get("dependencies") or []
    return not any(_replacement(dep) for dep in dependencies)


def fix_descriptor(ctx: SetupContext) -> StepResult:
    ctx.printer.info("Fixing ARM64 compatibility in environment file...")
    yaml = _yaml()
    descriptor = ctx.config.descriptor
    data = yaml.load(descriptor)
    dependencies = data["dependencies"]
    replaced = []
    for index, dep in enumerate(dependencies):
        replacement = _replacement(dep)
        if replacement is not None:
            logger.info("Replacing %r with %r in %s", dep, replacement, descriptor)
            dependencies[index] = replacement
            replaced.append(str(dep))
    yaml.dump(data, descriptor)
    return Succeeded(f"replaced {', '.join(replaced)}")


def skip_environment_create(ctx: SetupContext) -> bool:
    return environment_exists(ctx) or not descriptor_present(ctx)


def create_from_descriptor(ctx: SetupContext) -> StepResult:
    ctx.printer.info("Creating environment from YAML file...")
    config = ctx.config
    result = ctx.run(
        [str(config.mamba_bin), "env", "create", "--name", config.env_name, "--file", str(config.descriptor)],
        cwd=config.clone_dir,
        capture=False,
    )
    if not result.ok:
        return Failed(f"mamba env create exited with status {result.returncode}")
    return Succeeded(f"created {config.env_name} from {config.descriptor_path}")


def skip_base_environment(ctx: SetupContext) -> bool:
    return descriptor_present(ctx) or environment_exists(ctx)


def create_base_environment(ctx: SetupContext) -> StepResult:
    ctx.printer.warning("Environment file not found. Creating environment manually...")
    config = ctx.config
    result = ctx.run(
        [str(config.conda_bin), "create", "--name", config.env_name, f"python={config.python_version}", "-y"],
        capture=False,
    )
    if not result.ok:
        return Failed(f"conda create exited with status {result.returncode}")
    return Succeeded(f"created {config.env_name} with python {config.python_version}")


def package_installed(ctx: SetupContext, package: str) -> bool:
    """True when *package* is listed in the target environment."""
    if not environment_exists(ctx):
        return False
    result = ctx.run(
        [str(ctx.config.conda_bin), "list", "-n", ctx.config.env_name, "--full-name", package, "--json"],
    )
    if not result.ok:
        return False
    try:
        listed = json.loads(result.stdout or "[]")
    except json.JSONDecodeError:
        logger.debug("Unparseable conda list output for %s", package)
        return False
    return any(isinstance(entry, dict) and entry.get("name") == package for entry in listed)


def _package_step(package: str) -> Step:
    def precondition(ctx: SetupContext) -> bool:
        return descriptor_present(ctx) or package_installed(ctx, package)

    def skip_detail(ctx: SetupContext) -> str:
        if descriptor_present(ctx):
            return "provided by environment descriptor"
        return "already installed"

    def action(ctx: SetupContext) -> StepResult:
        ctx.printer.info(f"Installing {package}...")
        config = ctx.config
        channel_args = [arg for channel in config.channels for arg in ("-c", channel)]
        result = ctx.run(
            [
                str(config.mamba_bin),
                "install",
                "-n",
                config.env_name,
                "-y",
                "--strict-channel-priority",
                *channel_args,
                package,
            ],
            capture=False,
        )
        if not result.ok:
            return Failed(f"Failed to install {package}, continuing...")
        return Succeeded("installed")

    return Step(
        name=f"package:{package}",
        label=package,
        precondition=precondition,
        action=action,
        severity=Severity.WARNING,
        skip_detail=skip_detail,
    )


def environment_steps(ctx: SetupContext) -> list[Step]:
    steps = [
        Step(
            name="descriptor-fix",
            label="Environment file ARM64 fix",
            precondition=descriptor_fixed,
            action=fix_descriptor,
            severity=Severity.WARNING,
            skip_detail="nothing to fix",
        ),
        Step(
            name="environment-create",
            label="SEAsnake environment",
            precondition=skip_environment_create,
            action=create_from_descriptor,
            severity=Severity.WARNING,
            skip_detail=lambda ctx: (
                "already exists" if environment_exists(ctx) else "no environment file"
            ),
        ),
        Step(
            name="environment-base",
            label="SEAsnake base environment",
            precondition=skip_base_environment,
            action=create_base_environment,
            severity=Severity.WARNING,
            skip_detail=lambda ctx: (
                "using environment file" if descriptor_present(ctx) else "already exists"
            ),
        ),
    ]
    steps.extend(_package_step(package) for package in ctx.config.packages)
    return steps
