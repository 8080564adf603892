from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

import yaml

from .context import RunContext, default_tools
from .errors import CommandError, PrivilegeError, ProvisionError
from .lib.accounts import detect_invoking_user
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import PipelineResult, Step, run_pipeline
from .prompts import operator_for
from .settings import load_settings
from .steps import (
    ConfigureKvmStep,
    ConvertBaseImageStep,
    CreateDiskStep,
    CustomizeResourcesStep,
    FetchBaseImageStep,
    InstallPackagesStep,
    JoinGroupsStep,
    LaunchStep,
    SyncToolkitStep,
)

logger = logging.getLogger(__name__)


def build_steps() -> list[Step]:
    return [
        InstallPackagesStep(),
        SyncToolkitStep(),
        ConfigureKvmStep(),
        JoinGroupsStep(),
        FetchBaseImageStep(),
        ConvertBaseImageStep(),
        CreateDiskStep(),
        CustomizeResourcesStep(),
        LaunchStep(),
    ]


def provision(ctx: RunContext, steps: Optional[Sequence[Step]] = None) -> PipelineResult:
    """Run the provisioning pipeline against the host described by ctx."""

    if not ctx.elevated:
        raise PrivilegeError("This tool must be run as root.")

    result = run_pipeline(ctx=ctx, steps=list(steps) if steps is not None else build_steps())
    errors = result.state.get("errors") or []
    if errors:
        logger.warning("Finished with %d recoverable error(s): %s", len(errors), errors)
    logger.info("Changed: %s; already satisfied: %s", result.changed_steps, result.satisfied_steps)
    return result


def execute(ctx: RunContext, steps: Optional[Sequence[Step]] = None) -> int:
    """Run provision() and translate failures into exit statuses."""

    try:
        provision(ctx, steps)
        return 0
    except ProvisionError as e:
        logger.error("%s", e)
        return e.exit_code
    except CommandError as e:
        logger.exception("External command failed")
        return e.exit_code


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="kvm-macos-setup")
    p.add_argument("--config", default=None, help="YAML settings (default: /etc/kvm-macos-setup.yaml if present)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to the run log")
    p.add_argument("--dry-run", action="store_true", help="Log mutating commands instead of running them")

    args = p.parse_args(argv)

    if os.geteuid() != 0:
        print("This script must be run as root.", file=sys.stderr)
        return PrivilegeError.exit_code

    configure_logging(log_path=args.log)

    try:
        settings = load_settings(args.config)
        answers = settings.answers
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("Cannot load settings: %s", e)
        return 1

    try:
        user = detect_invoking_user()
    except KeyError as e:
        logger.error("Cannot resolve the invoking user: %s", e)
        return 1

    dry_run = bool(args.dry_run)
    ctx = RunContext(
        user=user,
        elevated=True,
        settings=settings,
        operator=operator_for(answers),
        tools=default_tools(dry_run=dry_run),
        dry_run=dry_run,
    )
    logger.info("Provisioning for user=%s toolkit=%s", user.name, str(ctx.toolkit_dir))
    return execute(ctx)


if __name__ == "__main__":
    raise SystemExit(main())
