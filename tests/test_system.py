import os

import pytest

from dazibao.common.exceptions import LockError, StartupError
from dazibao.common.settings import Settings
from dazibao.services.system import InstanceLock, ensure_assets


def test_lock_writes_pid_and_releases(tmp_path):
    path = tmp_path / "dazibao.lock"
    lock = InstanceLock(path)

    lock.acquire()
    assert lock.is_held
    assert path.read_text() == str(os.getpid())

    lock.release()
    assert not lock.is_held
    assert not path.exists()


def test_second_lock_fails(tmp_path):
    path = tmp_path / "dazibao.lock"
    with InstanceLock(path):
        with pytest.raises(LockError) as exc_info:
            InstanceLock(path).acquire()
    assert "already running" in str(exc_info.value)
    assert not path.exists()


def test_release_twice_is_harmless(tmp_path):
    lock = InstanceLock(tmp_path / "dazibao.lock")
    lock.acquire()
    lock.release()
    lock.release()


def test_ensure_assets_installs_bundled_files(tmp_path):
    settings = Settings(home_dir=tmp_path / "home")
    ensure_assets(settings)

    assert "${config_json}" in settings.template_path.read_text()
    assert settings.icon_path.read_bytes().startswith(b"\x89PNG")


def test_ensure_assets_keeps_existing_template(tmp_path):
    settings = Settings(home_dir=tmp_path / "home")
    settings.home_dir.mkdir()
    settings.template_path.write_text("custom ${config_json}")

    ensure_assets(settings)

    assert settings.template_path.read_text() == "custom ${config_json}"
    assert settings.icon_path.exists()


def test_ensure_assets_unwritable_home(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    with pytest.raises(StartupError):
        ensure_assets(Settings(home_dir=blocker / "home"))
