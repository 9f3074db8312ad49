"""Exception hierarchy for moldrun."""


class MoldRunError(RuntimeError):
    """Base class for errors reported to the user as a single line."""


class UsageError(MoldRunError):
    """Raised when the command line cannot be dispatched."""

    def __init__(self, message: str, usage: str | None = None) -> None:
        super().__init__(message)
        self.usage = usage


class ConfigError(MoldRunError):
    """Raised when moldrun configuration is invalid."""


class PlatformUnknownError(MoldRunError):
    """Raised when the host distribution cannot be identified."""


class PackageManagerInvocationError(MoldRunError):
    """Raised when the system package manager reports failure."""


class PostInstallVerificationError(MoldRunError):
    """Raised when installation claimed success but the linker is still missing."""


class InstallationFailedError(MoldRunError):
    """Raised once every install attempt has been used up."""

    def __init__(self, attempts: int, failures: list[str]) -> None:
        self.attempts = attempts
        self.failures = list(failures)
        msg = f'Failed to install linker after {attempts} attempt(s)'
        if self.failures:
            msg = f'{msg}: {self.failures[-1]}'
        super().__init__(msg)
