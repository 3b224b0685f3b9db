"""
Shared fixtures: bencode value trees for a minimal valid torrent in both
single-file and multi-file shape. Tests copy and tweak them.
"""

import bencodepy
import pytest


def piece(n: int) -> bytes:
    """A distinct 20 byte piece hash."""
    return bytes([n]) * 20


@pytest.fixture
def single_file_info() -> dict:
    return {
        b"name": b"a.txt",
        b"piece length": 16384,
        b"pieces": piece(1) + piece(2) + piece(3),
        b"length": 40000,
    }


@pytest.fixture
def multi_file_info() -> dict:
    return {
        b"name": b"album",
        b"piece length": 32768,
        b"pieces": piece(7),
        b"files": [
            {b"length": 5, b"path": [b"d", b"e.txt"]},
            {b"length": 7, b"path": [b"d", b"f.txt"]},
        ],
    }


@pytest.fixture
def single_file_torrent(single_file_info) -> dict:
    return {b"announce": b"http://tracker.example/announce", b"info": single_file_info}


@pytest.fixture
def multi_file_torrent(multi_file_info) -> dict:
    return {b"info": multi_file_info}


@pytest.fixture
def write_torrent(tmp_path):
    """Bencode a value tree into a file and return its path."""

    def write(value, name="test.torrent"):
        path = tmp_path / name
        path.write_bytes(bencodepy.encode(value))
        return path

    return write
