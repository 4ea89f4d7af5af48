"""Shared fixtures."""

import asyncio

import pytest

from diskscope.demo import demo_scan_result


@pytest.fixture
def demo_result():
    return demo_scan_result()


@pytest.fixture
def make_tree(tmp_path):
    """Small on-disk tree: root/{big.bin, small.txt, sub/{nested.dat}}."""

    def _make():
        (tmp_path / "big.bin").write_bytes(b"x" * 4096)
        (tmp_path / "small.txt").write_bytes(b"y" * 10)
        sub = tmp_path / "sub"
        sub.mkdir()
        (sub / "nested.dat").write_bytes(b"z" * 1000)
        return tmp_path

    return _make


class FakeBackend:
    """Scan backend whose scans resolve when the test says so."""

    def __init__(self):
        self.calls = []
        self.pending = []
        self.on_progress = None

    async def scan(self, path, on_progress):
        self.calls.append(path)
        self.on_progress = on_progress
        future = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        return await future

    def resolve(self, result):
        self.pending.pop(0).set_result(result)

    def reject(self, error):
        self.pending.pop(0).set_exception(error)


@pytest.fixture
def backend():
    return FakeBackend()
