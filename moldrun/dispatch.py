"""Assemble and run the final `mold -run cargo ...` invocation."""

import shlex
import subprocess

from moldrun.config import RunnerSettings
from moldrun.errors import UsageError
from moldrun.logging import get_logger
from moldrun.models import InvocationRequest
from moldrun.registry import PASS_THROUGH_COMMAND

logger = get_logger(__name__)

COMMAND_NOT_FOUND_EXIT_CODE = 127


def pass_through_usage(prog: str = 'mold-run') -> str:
    return f'Usage: {prog} {PASS_THROUGH_COMMAND} [cargo-commands]'


def validate_request(request: InvocationRequest, prog: str = 'mold-run') -> None:
    """Reject requests that cannot be dispatched."""
    if request.subcommand == PASS_THROUGH_COMMAND and not request.trailing_args:
        msg = f"'{PASS_THROUGH_COMMAND}' requires additional cargo commands"
        raise UsageError(msg, usage=pass_through_usage(prog))


def build_command(request: InvocationRequest, settings: RunnerSettings) -> list[str]:
    """Build the argv for the wrapped build-tool invocation."""
    prefix = [settings.linker, *settings.linker_args, settings.build_tool]
    if request.subcommand == PASS_THROUGH_COMMAND:
        return [*prefix, *request.trailing_args]
    return [*prefix, request.subcommand, *request.trailing_args]


def dispatch(request: InvocationRequest, settings: RunnerSettings) -> int:
    """Run the wrapped command with inherited stdio and return its exit code."""
    validate_request(request)
    cmd = build_command(request, settings)
    logger.info('running_command', command=shlex.join(cmd))

    try:
        result = subprocess.run(cmd, check=False)  # noqa: S603 - user-requested build
    except FileNotFoundError:
        logger.error('linker_not_executable', linker=settings.linker)
        return COMMAND_NOT_FOUND_EXIT_CODE

    logger.debug('command_finished', returncode=result.returncode)
    if result.returncode < 0:
        # Killed by signal N: report 128 + N like a shell does
        return 128 - result.returncode
    return result.returncode
