"""Tests for distribution detection."""

from pathlib import Path

import pytest

from moldrun.distro import identify_platform, read_os_release, resolve_platform
from moldrun.errors import PlatformUnknownError
from moldrun.models import PlatformIdentifier


def _write_os_release(tmp_path: Path, content: str) -> Path:
    path = tmp_path / 'os-release'
    path.write_text(content)
    return path


class TestReadOsRelease:
    """Tests for read_os_release."""

    def test_parses_quoted_and_bare_values(self, tmp_path: Path) -> None:
        """Test that double, single and unquoted values are all read."""
        path = _write_os_release(
            tmp_path,
            'NAME="Fedora Linux"\nID=fedora\nVARIANT=\'Workstation Edition\'\n',
        )
        values = read_os_release(path)
        assert values == {
            'NAME': 'Fedora Linux',
            'ID': 'fedora',
            'VARIANT': 'Workstation Edition',
        }

    def test_skips_comments_and_blank_lines(self, tmp_path: Path) -> None:
        """Test that comments and malformed lines are ignored."""
        path = _write_os_release(tmp_path, '# comment\n\nID=arch\nnot a pair\n')
        assert read_os_release(path) == {'ID': 'arch'}


class TestIdentifyPlatform:
    """Tests for identify_platform."""

    @pytest.mark.parametrize(
        ('distro_id', 'expected'),
        [
            ('debian', PlatformIdentifier.DEBIAN),
            ('ubuntu', PlatformIdentifier.DEBIAN),
            ('fedora', PlatformIdentifier.FEDORA),
            ('arch', PlatformIdentifier.ARCH),
            ('manjaro', PlatformIdentifier.ARCH),
            ('suse', PlatformIdentifier.SUSE),
            ('opensuse-tumbleweed', PlatformIdentifier.SUSE),
            ('opensuse-leap', PlatformIdentifier.SUSE),
        ],
    )
    def test_known_ids(self, distro_id: str, expected: PlatformIdentifier) -> None:
        """Test the fixed mapping table including the opensuse prefix."""
        assert identify_platform(distro_id) is expected

    @pytest.mark.parametrize('distro_id', ['nosuchos', 'Ubuntu', 'centos', '', 'debian-like'])
    def test_unknown_ids(self, distro_id: str) -> None:
        """Test that unmatched or differently cased IDs are unknown."""
        assert identify_platform(distro_id) is PlatformIdentifier.UNKNOWN


class TestResolvePlatform:
    """Tests for resolve_platform."""

    def test_ubuntu_resolves_to_debian_family(self, os_release: Path) -> None:
        """Test that ID=ubuntu maps to the debian family."""
        assert resolve_platform(os_release) is PlatformIdentifier.DEBIAN

    def test_unknown_id_raises(self, tmp_path: Path) -> None:
        """Test that an unrecognised ID is a PlatformUnknownError."""
        path = _write_os_release(tmp_path, 'ID=nosuchos\n')
        with pytest.raises(PlatformUnknownError, match='Unsupported distribution: nosuchos'):
            resolve_platform(path)

    def test_missing_id_raises(self, tmp_path: Path) -> None:
        """Test that a file without ID is a PlatformUnknownError."""
        path = _write_os_release(tmp_path, 'NAME="Mystery"\n')
        with pytest.raises(PlatformUnknownError, match='missing ID'):
            resolve_platform(path)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """Test that an absent os-release file is a PlatformUnknownError."""
        with pytest.raises(PlatformUnknownError, match='not found'):
            resolve_platform(tmp_path / 'missing')
