from pathlib import Path

import pytest

from moldrun.config import CONFIG_ENV_VAR, RunnerSettings

UBUNTU_OS_RELEASE = """\
PRETTY_NAME="Ubuntu 24.04 LTS"
NAME="Ubuntu"
VERSION_ID="24.04"
ID=ubuntu
ID_LIKE=debian
"""


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep tests away from any moldrun.config.yaml or MOLDRUN_CONFIG on the host."""
    workdir = tmp_path / 'work'
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    return workdir


@pytest.fixture
def os_release(tmp_path: Path) -> Path:
    path = tmp_path / 'os-release'
    path.write_text(UBUNTU_OS_RELEASE)
    return path


@pytest.fixture
def settings(os_release: Path) -> RunnerSettings:
    return RunnerSettings(os_release_path=os_release)
