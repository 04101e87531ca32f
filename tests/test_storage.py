import json

import pytest

from dazibao.common.config import create_default_config
from dazibao.common.exceptions import ConfigError, ConfigNotFoundError, PersistenceError, StartupError
from dazibao.services.config import ConfigStorage


def test_load_or_create_writes_default(tmp_path):
    path = tmp_path / "config.json"
    storage = ConfigStorage(path)

    tree = storage.load_or_create()

    assert path.exists()
    assert [b.title for b in tree.blocks] == ["Uptime", "Disk Usage", "System Info"]
    assert storage.load() == tree


def test_save_load_round_trip(tmp_path):
    storage = ConfigStorage(tmp_path / "config.json")
    tree = create_default_config()
    tree.blocks[1].output = "Filesystem  Size"
    tree.version = "0.1.0"

    storage.save(tree)

    assert storage.load() == tree
    assert not (tmp_path / ".config.json.tmp").exists()


def test_saved_file_is_indented_json(tmp_path):
    path = tmp_path / "config.json"
    ConfigStorage(path).save(create_default_config())
    text = path.read_text()
    assert text.startswith("{\n  ")
    assert json.loads(text)["port"] == 8080


def test_missing_file_raises_not_found(tmp_path):
    with pytest.raises(ConfigNotFoundError):
        ConfigStorage(tmp_path / "missing.json").load()


def test_malformed_json_is_config_error(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError):
        ConfigStorage(path).load()


def test_invalid_config_is_fatal_at_startup(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"blocks": [{"type": "single", "title": "x", "interval": 0}]}))

    with pytest.raises(StartupError):
        ConfigStorage(path).load_or_create()


def test_save_failure_raises_persistence_error(tmp_path):
    storage = ConfigStorage(tmp_path / "no-such-dir" / "config.json")
    with pytest.raises(PersistenceError):
        storage.save(create_default_config())
