from dataclasses import dataclass

import httpx

from turbometa.torrent.addresses import Host
from turbometa.torrent.digest import Sha1Hash
from turbometa.torrent.tree import DirNode, DirTreeNode


@dataclass(frozen=True, slots=True)
class TorrentFile:
    path: tuple[str, ...]
    length: int
    offset: int


@dataclass(frozen=True)
class TorrentMetadata:
    """
    A decoded, validated torrent.

    Built in one go by ``turbometa.torrent.parser.decode`` and never mutated
    afterwards, so instances can be shared freely.
    """

    # tiers of tracker urls, both levels in file order (BEP 12)
    trackers: tuple[tuple[httpx.URL, ...], ...]
    # DHT bootstrap hints as (host, port)
    nodes: tuple[tuple[Host, int], ...]
    # Hoffman-style http seeds (BEP 17)
    httpseeds: tuple[httpx.URL, ...]
    # GetRight-style web seed (BEP 19)
    urllist: httpx.URL | None
    private: bool
    piece_length: int
    pieces: tuple[Sha1Hash, ...]
    # BEP 30
    merkle_root: Sha1Hash | None
    filename: str
    contents: DirTreeNode
    info_hash: Sha1Hash
    # files in 'info.files' order, offsets into the concatenated content the
    # pieces are hashed over; paths start with filename
    files: tuple[TorrentFile, ...]

    @property
    def is_multi_file(self) -> bool:
        return isinstance(self.contents, DirNode)

    @property
    def total_length(self) -> int:
        return self.contents.total_size()
