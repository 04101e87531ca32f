import time

import pytest

from dazibao.common.config import ConfigurationTree, GroupBlock, GroupCommand, SingleBlock
from dazibao.common.settings import Settings
from dazibao.services.system import ensure_assets


@pytest.fixture
def settings(tmp_path):
    """Settings rooted in a temporary home with the bundled assets installed"""
    s = Settings(home_dir=tmp_path / "home")
    ensure_assets(s)
    return s


def make_tree(*blocks, port=8080):
    return ConfigurationTree(blocks=list(blocks), port=port, version="test")


def single(title="Echo", command="echo hi", interval=5):
    return SingleBlock(title=title, command=command, interval=interval)


def group(title="Group", commands=(("A", "echo a"), ("B", "echo b")), interval=5):
    return GroupBlock(
        title=title,
        commands=[GroupCommand(label=label, command=cmd) for label, cmd in commands],
        interval=interval,
    )


class MemoryPersister:
    """Records every saved tree; optionally fails"""

    def __init__(self, error=None):
        self.saved = []
        self.error = error

    def save(self, tree):
        if self.error is not None:
            raise self.error
        self.saved.append(tree)


class SlowPersister:
    """Blocks in save() like a slow disk; records the outputs it finished writing"""

    def __init__(self, delay=0.01):
        self.delay = delay
        self.written = []

    def save(self, tree):
        time.sleep(self.delay)
        self.written.append(tuple(c.output for c in tree.blocks[0].commands))
