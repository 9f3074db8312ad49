"""Map /etc/os-release to a known distribution family."""

from pathlib import Path

from moldrun.errors import PlatformUnknownError
from moldrun.logging import get_logger
from moldrun.models import PlatformIdentifier

logger = get_logger(__name__)

EXACT_IDS: dict[str, PlatformIdentifier] = {
    'debian': PlatformIdentifier.DEBIAN,
    'ubuntu': PlatformIdentifier.DEBIAN,
    'fedora': PlatformIdentifier.FEDORA,
    'arch': PlatformIdentifier.ARCH,
    'manjaro': PlatformIdentifier.ARCH,
    'suse': PlatformIdentifier.SUSE,
}

PREFIX_IDS: dict[str, PlatformIdentifier] = {
    'opensuse': PlatformIdentifier.SUSE,
}

SUPPORTED_DISTRIBUTIONS = 'debian, ubuntu, fedora, arch, manjaro, opensuse'


def read_os_release(path: Path) -> dict[str, str]:
    """Parse an os-release file into a key/value mapping."""
    values: dict[str, str] = {}
    for raw_line in path.read_text(encoding='utf-8').splitlines():
        line = raw_line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, value = line.split('=', 1)
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
            value = value[1:-1]
        values[key.strip()] = value
    return values


def identify_platform(distro_id: str) -> PlatformIdentifier:
    """Map an os-release ID to its platform family."""
    if distro_id in EXACT_IDS:
        return EXACT_IDS[distro_id]
    for prefix, platform in PREFIX_IDS.items():
        if distro_id.startswith(prefix):
            return platform
    return PlatformIdentifier.UNKNOWN


def resolve_platform(os_release_path: Path = Path('/etc/os-release')) -> PlatformIdentifier:
    """Resolve the host platform, failing when it cannot be identified."""
    try:
        os_release = read_os_release(os_release_path)
    except FileNotFoundError as exc:
        msg = f'Cannot detect OS distribution: {os_release_path} not found'
        raise PlatformUnknownError(msg) from exc
    except OSError as exc:
        msg = f'Cannot detect OS distribution: {exc}'
        raise PlatformUnknownError(msg) from exc

    distro_id = os_release.get('ID', '')
    platform = identify_platform(distro_id)
    if platform is PlatformIdentifier.UNKNOWN:
        shown = distro_id or '<missing ID>'
        msg = f'Unsupported distribution: {shown} (supported distributions: {SUPPORTED_DISTRIBUTIONS})'
        raise PlatformUnknownError(msg)

    logger.debug('resolved_platform', distro_id=distro_id, platform=platform.value)
    return platform
