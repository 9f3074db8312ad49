"""Main CLI entry point for mold-run."""

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from moldrun.config import load_settings
from moldrun.dispatch import dispatch, validate_request
from moldrun.errors import MoldRunError, UsageError
from moldrun.installation import ensure_linker
from moldrun.logging import configure_logging, get_logger
from moldrun.models import CliArgs
from moldrun.registry import format_commands, is_valid_command

logger = get_logger(__name__)

PROG = 'mold-run'
USAGE = f'Usage: {PROG} [cargo-command] [additional-args]'


class RunnerArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports problems as UsageError instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message, usage=USAGE)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = RunnerArgumentParser(
        prog=PROG,
        description='Run cargo commands through the mold linker, installing mold when missing',
        epilog=format_commands(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging',
    )
    parser.add_argument(
        '--config',
        type=Path,
        help='Path to moldrun configuration file (default: moldrun.config.yaml)',
    )
    parser.add_argument(
        'command',
        nargs='?',
        help='Cargo command to run',
    )
    parser.add_argument(
        'args',
        nargs=argparse.REMAINDER,
        help='Arguments forwarded to cargo unchanged',
    )
    return parser


# mold-run options that take a value; the token after them is never the command
OPTIONS_WITH_VALUE = ('--config',)


def split_argv(argv: list[str]) -> tuple[list[str], str | None, list[str]]:
    """Split argv into mold-run options, the subcommand, and the forwarded tail.

    Everything after the subcommand is returned verbatim, including `--`.
    """
    idx = 0
    while idx < len(argv):
        token = argv[idx]
        if token in OPTIONS_WITH_VALUE:
            idx += 2
            continue
        if token.startswith('-') and token != '-':
            idx += 1
            continue
        return argv[:idx], token, argv[idx + 1 :]
    return argv, None, []


def parse_args_to_model(argv: list[str] | None = None) -> CliArgs:
    """Parse command line arguments into a typed Pydantic model."""
    if argv is None:
        argv = sys.argv[1:]
    head, command, tail = split_argv(list(argv))

    parser = create_parser()
    raw_args = parser.parse_args(head)
    return CliArgs(
        command=command,
        args=tail,
        config=raw_args.config,
        verbose=raw_args.verbose,
    )


def _print_usage(usage: str | None, linker: str = 'mold') -> None:
    if usage:
        sys.stdout.write(f'{usage}\n')
    sys.stdout.write(f'{format_commands(linker)}\n')


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the mold-run CLI."""
    try:
        args = parse_args_to_model(argv)
    except UsageError as e:
        sys.stderr.write(f'Error: {e}\n')
        _print_usage(e.usage)
        return 1

    if args.command is None:
        _print_usage(USAGE)
        return 1

    configure_logging(verbose=args.verbose)

    try:
        settings = load_settings(args.config)
    except MoldRunError as e:
        sys.stderr.write(f'Error: {e}\n')
        return 1

    if not is_valid_command(args.command):
        sys.stderr.write(f"Invalid command '{args.command}'\n")
        _print_usage(None, settings.linker)
        return 1

    request = args.to_request()
    logger.info(
        'starting_moldrun',
        subcommand=request.subcommand,
        trailing_args=list(request.trailing_args),
        _verbose_settings=settings.model_dump(mode='json'),
    )

    try:
        validate_request(request, prog=PROG)
        ensure_linker(settings)
        return dispatch(request, settings)
    except UsageError as e:
        sys.stderr.write(f'Error: {e}\n')
        if e.usage:
            sys.stdout.write(f'{e.usage}\n')
        return 1
    except MoldRunError as e:
        logger.debug('cli_operation_failed', error=str(e), exc_info=True)
        sys.stderr.write(f'Error: {e}\n')
        return 1


if __name__ == '__main__':
    sys.exit(main())
