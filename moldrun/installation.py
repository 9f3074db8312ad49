"""Install the linker through the host's package manager."""

import subprocess
import time
from collections.abc import Callable

from moldrun.config import RunnerSettings
from moldrun.distro import resolve_platform
from moldrun.errors import (
    InstallationFailedError,
    PackageManagerInvocationError,
    PlatformUnknownError,
    PostInstallVerificationError,
)
from moldrun.logging import get_logger
from moldrun.models import InstallAttempt, PlatformIdentifier
from moldrun.presence import is_dependency_installed

logger = get_logger(__name__)


def _apt_commands(package: str) -> list[list[str]]:
    return [
        ['apt-get', 'update', '-qq'],
        ['apt-get', 'install', '-y', package],
    ]


def _dnf_commands(package: str) -> list[list[str]]:
    return [['dnf', 'install', '-y', package]]


def _pacman_commands(package: str) -> list[list[str]]:
    return [['pacman', '-S', '--noconfirm', package]]


def _zypper_commands(package: str) -> list[list[str]]:
    return [['zypper', 'install', '-y', package]]


PACKAGE_MANAGER_HANDLERS: dict[PlatformIdentifier, Callable[[str], list[list[str]]]] = {
    PlatformIdentifier.DEBIAN: _apt_commands,
    PlatformIdentifier.FEDORA: _dnf_commands,
    PlatformIdentifier.ARCH: _pacman_commands,
    PlatformIdentifier.SUSE: _zypper_commands,
}


def package_manager_commands(
    platform: PlatformIdentifier,
    package: str,
    *,
    use_sudo: bool = True,
) -> list[list[str]]:
    """Build the non-interactive install commands for a platform, in run order."""
    handler = PACKAGE_MANAGER_HANDLERS.get(platform)
    if handler is None:
        msg = f'No package manager known for platform: {platform.value}'
        raise PlatformUnknownError(msg)
    commands = handler(package)
    if use_sudo:
        return [['sudo', *cmd] for cmd in commands]
    return commands


def run_package_manager(commands: list[list[str]], platform: PlatformIdentifier) -> None:
    """Run each command in turn, stopping at the first failure."""
    for cmd in commands:
        logger.debug('running_package_manager', command=' '.join(cmd))
        try:
            subprocess.run(cmd, check=True)  # noqa: S603 - fixed per-platform invocation
        except subprocess.CalledProcessError as exc:
            msg = f'{_manager_name(cmd)} installation failed (exit code {exc.returncode})'
            raise PackageManagerInvocationError(msg) from exc
        except OSError as exc:
            msg = f'{_manager_name(cmd)} could not be started: {exc}'
            raise PackageManagerInvocationError(msg) from exc
    logger.debug('package_manager_succeeded', platform=platform.value)


def _manager_name(cmd: list[str]) -> str:
    return cmd[1] if cmd[0] == 'sudo' and len(cmd) > 1 else cmd[0]


class DependencyInstaller:
    """Bounded retry loop around the platform package manager."""

    def __init__(
        self,
        settings: RunnerSettings,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings
        self._sleep = sleep

    def install(self) -> int:
        """Install the linker, returning the number of attempts used.

        Raises:
            PlatformUnknownError: The host distribution is missing or unsupported.
            InstallationFailedError: Every attempt failed.
        """
        attempt = InstallAttempt(
            max_attempts=self.settings.max_attempts,
            delay_seconds=self.settings.delay_seconds,
        )
        failures: list[str] = []

        while not attempt.exhausted:
            if attempt.is_retry:
                logger.info(
                    'retrying_install',
                    attempt=attempt.index,
                    max_attempts=attempt.max_attempts,
                    delay_seconds=attempt.delay_seconds,
                )
                self._sleep(attempt.delay_seconds)

            try:
                self._attempt()
            except (PackageManagerInvocationError, PostInstallVerificationError) as exc:
                failures.append(str(exc))
                attempt = attempt.next()
                continue

            logger.info('linker_install_succeeded', attempts=attempt.index + 1)
            return attempt.index + 1

        logger.error(
            'linker_install_failed',
            attempts=attempt.max_attempts,
            _verbose_failures=failures,
        )
        raise InstallationFailedError(attempt.max_attempts, failures)

    def _attempt(self) -> None:
        platform = resolve_platform(self.settings.os_release_path)
        logger.info('installing_linker', package=self.settings.package, platform=platform.value)

        commands = package_manager_commands(
            platform,
            self.settings.package,
            use_sudo=self.settings.use_sudo,
        )
        try:
            run_package_manager(commands, platform)
        except PackageManagerInvocationError as exc:
            logger.warning('package_manager_failed', platform=platform.value, error=str(exc))
            raise

        if not is_dependency_installed(self.settings):
            logger.warning('post_install_verification_failed', linker=self.settings.linker)
            msg = f'Installation appeared to succeed but {self.settings.linker} command not found'
            raise PostInstallVerificationError(msg)


def ensure_linker(
    settings: RunnerSettings,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Make sure the linker is present, installing it when missing.

    Returns False when installation failed terminally and the run should
    continue without the linker. With ``require_linker`` set, the failure
    propagates instead.
    """
    if is_dependency_installed(settings):
        return True

    try:
        DependencyInstaller(settings, sleep=sleep).install()
    except (PlatformUnknownError, InstallationFailedError) as exc:
        if settings.require_linker:
            raise
        logger.warning('continuing_without_linker', reason=str(exc))
        return False
    return True
