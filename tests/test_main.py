import json

import pytest

import main as cli


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    # keep the CLI from reconfiguring the test process' root logger
    monkeypatch.setattr(cli, "config_logging", lambda *args, **kwargs: None)


def test_dump_single_file(write_torrent, single_file_torrent, capsys):
    path = write_torrent(single_file_torrent)

    assert cli.main([str(path)]) == 0

    out = capsys.readouterr().out
    assert f"## {path}" in out
    assert "trackers: [['http://tracker.example/announce']]" in out
    assert "filename: a.txt" in out
    assert "pieces: 3 x 16384 bytes" in out
    assert "size: 40000 bytes" in out


def test_dump_multi_file_prints_tree(write_torrent, multi_file_torrent, capsys):
    path = write_torrent(multi_file_torrent)

    assert cli.main([str(path)]) == 0

    out = capsys.readouterr().out
    assert "album/\n  d/\n    e.txt (5 bytes)\n    f.txt (7 bytes)\n" in out


def test_dump_reports_errors_and_fails(write_torrent, single_file_torrent, tmp_path, capsys):
    good = write_torrent(single_file_torrent)
    bad = write_torrent({b"info": {b"name": b"x"}}, name="bad.torrent")
    missing = tmp_path / "missing.torrent"

    assert cli.main([str(good), str(bad), str(missing)]) == 1

    out = capsys.readouterr().out
    assert "filename: a.txt" in out
    assert "Error: PIECE_LENGTH_NOT_PRESENT: 'piece length' is missing" in out
    assert "Error: TorrentReadError:" in out


def test_dump_json(write_torrent, multi_file_torrent, capsys):
    path = write_torrent(multi_file_torrent)

    assert cli.main([str(path), "--json"]) == 0

    record = json.loads(capsys.readouterr().out)
    assert record["path"] == str(path)
    torrent = record["torrent"]
    assert torrent["filename"] == "album"
    assert torrent["trackers"] == []
    assert torrent["total_length"] == 12
    assert torrent["files"] == [
        {"path": ["album", "d", "e.txt"], "length": 5, "offset": 0},
        {"path": ["album", "d", "f.txt"], "length": 7, "offset": 5},
    ]
    assert len(torrent["info_hash"]) == 40


def test_dump_json_error(tmp_path, capsys):
    corrupt = tmp_path / "corrupt.torrent"
    corrupt.write_bytes(b"i1")

    assert cli.main([str(corrupt), "--json"]) == 1

    record = json.loads(capsys.readouterr().out)
    assert record["error"].startswith("InvalidBencodeError:")
