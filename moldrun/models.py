"""Pydantic models for moldrun."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CommandDescriptor(BaseModel):
    """A supported cargo subcommand and its help text."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate that name is not empty."""
        if not v.strip():
            msg = 'Command name cannot be empty'
            raise ValueError(msg)
        return v


class PlatformIdentifier(str, Enum):
    """Linux distribution families that share a package manager."""

    DEBIAN = 'debian'
    FEDORA = 'fedora'
    ARCH = 'arch'
    SUSE = 'suse'
    UNKNOWN = 'unknown'


class InstallAttempt(BaseModel):
    """Position within a bounded chain of install attempts."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(default=0, ge=0)
    max_attempts: int = Field(default=3, ge=1)
    delay_seconds: float = Field(default=5.0, ge=0)

    @property
    def exhausted(self) -> bool:
        """Whether no attempts remain."""
        return self.index >= self.max_attempts

    @property
    def is_retry(self) -> bool:
        """Whether this attempt follows a failed one and must back off first."""
        return self.index > 0

    def next(self) -> 'InstallAttempt':
        """Return the attempt that follows this one."""
        return self.model_copy(update={'index': self.index + 1})


class InvocationRequest(BaseModel):
    """The subcommand and forwarded arguments for a single run."""

    model_config = ConfigDict(frozen=True)

    subcommand: str
    trailing_args: tuple[str, ...] = ()


class CliArgs(BaseModel):
    """Parsed command line for mold-run."""

    command: str | None = None
    args: list[str] = Field(default_factory=list)
    config: Path | None = None
    verbose: bool = False

    def to_request(self) -> InvocationRequest:
        """Freeze the subcommand and its forwarded arguments."""
        return InvocationRequest(
            subcommand=self.command or '',
            trailing_args=tuple(self.args),
        )
