"""Check whether the linker binary is reachable on PATH."""

import shutil
import subprocess

from moldrun.config import RunnerSettings
from moldrun.logging import get_logger

logger = get_logger(__name__)


def probe_version(binary: str) -> str:
    """Ask the linker for its version string."""
    try:
        result = subprocess.run(  # noqa: S603 - binary comes from shutil.which
            [binary, '--version'],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        logger.debug('version_probe_failed', binary=binary, error=str(exc))
        return 'unknown version'
    return result.stdout.strip() or 'unknown version'


def is_dependency_installed(settings: RunnerSettings) -> bool:
    """Return True when the linker is on PATH, logging a status line either way."""
    binary = shutil.which(settings.linker)
    if binary is None:
        logger.info('linker_not_found', linker=settings.linker)
        return False

    version = probe_version(binary)
    logger.info(
        'linker_installed',
        linker=settings.linker,
        version=version,
        _verbose_path=binary,
    )
    return True
