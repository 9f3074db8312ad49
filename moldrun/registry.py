"""Supported cargo subcommands."""

from moldrun.models import CommandDescriptor

PASS_THROUGH_COMMAND = 'free'

# Display order of the help listing follows declaration order
COMMANDS: tuple[CommandDescriptor, ...] = (
    CommandDescriptor(name='run', description='Run the project'),
    CommandDescriptor(name='build', description='Build the project'),
    CommandDescriptor(name='test', description='Run the project tests'),
    CommandDescriptor(name='check', description='Check the project'),
    CommandDescriptor(name='bench', description='Run benchmarks'),
    CommandDescriptor(name=PASS_THROUGH_COMMAND, description='Run custom Rust commands'),
)


def list_commands() -> tuple[CommandDescriptor, ...]:
    """Return every supported command in display order."""
    return COMMANDS


def is_valid_command(name: str | None) -> bool:
    """Check whether a subcommand name is supported (exact, case-sensitive)."""
    if not name:
        return False
    return any(command.name == name for command in COMMANDS)


def format_commands(linker: str = 'mold') -> str:
    """Render the supported commands for usage output."""
    lines = ['Commands:']
    lines.extend(f'  {command.name:<7}   {command.description} with {linker} linker' for command in list_commands())
    return '\n'.join(lines)
