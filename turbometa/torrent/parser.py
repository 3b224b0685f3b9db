import hashlib
import bencodepy
from pathlib import Path
from turbometa.torrent.addresses import AddressParseError, Host, parse_host, parse_url
from turbometa.torrent.digest import InvalidHashLength, Sha1Hash, HASH_LENGTH
from turbometa.torrent.errors import (
    DecodeError,
    DecodeErrorKind as Kind,
    InvalidBencodeError,
    InvalidTorrentError,
    TorrentReadError,
)
from turbometa.torrent.metadata import TorrentFile, TorrentMetadata
from turbometa.torrent.tree import DirTreeNode, FileNode, freeze
import logging

logger = logging.getLogger(__name__)

# bencode variants as they come out of bencodepy
BYTES = (bytes, bytearray)
NUMBER = int
LIST = list
DICT = dict

U16_MAX = 2**16 - 1
U64_MAX = 2**64 - 1


def _expect(value, shape, kind: Kind):
    """Return ``value`` if it is of the bencode ``shape``, else fail with ``kind``."""
    # bool is an int subclass but never a bencode integer
    if not isinstance(value, shape) or isinstance(value, bool):
        raise DecodeError(kind)
    return value


def _text(value, not_a_string: Kind, invalid_utf8: Kind) -> str:
    raw = _expect(value, BYTES, not_a_string)
    try:
        return bytes(raw).decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(invalid_utf8, e) from e


def _url(value, not_a_string: Kind, invalid_utf8: Kind, parse_error: Kind):
    text = _text(value, not_a_string, invalid_utf8)
    try:
        return parse_url(text)
    except AddressParseError as e:
        raise DecodeError(parse_error, e) from e


def _number(value, not_a_number: Kind, out_of_range: Kind, maximum: int) -> int:
    number = _expect(value, NUMBER, not_a_number)
    if not 0 <= number <= maximum:
        raise DecodeError(out_of_range, number)
    return number


def _trackers(metainfo: dict) -> tuple:
    # announce-list wins whenever present, even when it holds no tiers
    if (announce_list := metainfo.get(b"announce-list")) is not None:
        tiers = []
        for tier in _expect(announce_list, LIST, Kind.ANNOUNCE_LIST_NOT_A_LIST):
            urls = [
                _url(
                    tracker,
                    Kind.TRACKER_URL_NOT_A_STRING,
                    Kind.TRACKER_URL_INVALID_UTF8,
                    Kind.TRACKER_URL_PARSE_ERROR,
                )
                for tracker in _expect(tier, LIST, Kind.ANNOUNCE_LIST_TIER_NOT_A_LIST)
            ]
            tiers.append(tuple(urls))
        logger.debug(f"Read {len(tiers)} tracker tier(s) from announce-list")
        return tuple(tiers)

    if (announce := metainfo.get(b"announce")) is not None:
        url = _url(
            announce,
            Kind.ANNOUNCE_URL_NOT_A_STRING,
            Kind.ANNOUNCE_URL_INVALID_UTF8,
            Kind.ANNOUNCE_URL_PARSE_ERROR,
        )
        return ((url,),)

    return ()


def _node(value) -> tuple[Host, int]:
    node = _expect(value, LIST, Kind.NODE_NOT_A_LIST)
    if len(node) != 2:
        raise DecodeError(Kind.NODE_INVALID_LIST)
    host_be, port_be = node

    text = _text(host_be, Kind.NODE_HOST_NOT_A_STRING, Kind.NODE_HOST_INVALID_UTF8)
    try:
        host = parse_host(text)
    except AddressParseError as e:
        raise DecodeError(Kind.NODE_HOST_PARSE_ERROR, e) from e

    port = _number(
        port_be, Kind.NODE_PORT_NOT_A_NUMBER, Kind.NODE_PORT_OUT_OF_RANGE, U16_MAX
    )
    return host, port


def _nodes(metainfo: dict) -> tuple:
    if (nodes := metainfo.get(b"nodes")) is None:
        return ()
    return tuple(_node(n) for n in _expect(nodes, LIST, Kind.NODE_LIST_NOT_A_LIST))


def _web_seeds(metainfo: dict):
    urllist = None
    if (url_list := metainfo.get(b"url-list")) is not None:
        urllist = _url(
            url_list,
            Kind.URL_LIST_NOT_A_STRING,
            Kind.URL_LIST_INVALID_UTF8,
            Kind.URL_LIST_PARSE_ERROR,
        )

    httpseeds = ()
    if (seeds := metainfo.get(b"httpseeds")) is not None:
        httpseeds = tuple(
            _url(
                seed,
                Kind.HTTP_SEED_NOT_A_STRING,
                Kind.HTTP_SEED_INVALID_UTF8,
                Kind.HTTP_SEED_PARSE_ERROR,
            )
            for seed in _expect(seeds, LIST, Kind.HTTP_SEEDS_NOT_A_LIST)
        )
    return urllist, httpseeds


def _info_dict(metainfo: dict) -> dict:
    if (info := metainfo.get(b"info")) is not None:
        return _expect(info, DICT, Kind.INFO_DICT_NOT_A_DICT)
    # nonstandard: some generators put the info keys at the top level
    logger.warning("No 'info' dictionary, reading info keys from the top level")
    return metainfo


def _pieces(info: dict) -> tuple[Sha1Hash, ...]:
    if (pieces := info.get(b"pieces")) is None:
        raise DecodeError(Kind.PIECES_NOT_PRESENT)
    raw = bytes(_expect(pieces, BYTES, Kind.PIECES_NOT_A_STRING))
    if len(raw) % HASH_LENGTH != 0:
        raise DecodeError(Kind.INVALID_PIECES_LENGTH, len(raw))
    return tuple(
        Sha1Hash.from_buffer(raw[i : i + HASH_LENGTH])
        for i in range(0, len(raw), HASH_LENGTH)
    )


def _add_file(tree: dict, entry) -> tuple[tuple[str, ...], int]:
    file_info = _expect(entry, DICT, Kind.FILE_INFO_NOT_A_DICT)

    if (length := file_info.get(b"length")) is None:
        raise DecodeError(Kind.FILE_LENGTH_NOT_PRESENT)
    length = _number(
        length, Kind.FILE_LENGTH_NOT_A_NUMBER, Kind.FILE_LENGTH_OUT_OF_RANGE, U64_MAX
    )

    if (path := file_info.get(b"path")) is None:
        raise DecodeError(Kind.FILE_PATH_NOT_PRESENT)
    path = _expect(path, LIST, Kind.FILE_PATH_NOT_A_LIST)
    if not path:
        raise DecodeError(Kind.EMPTY_FILE_PATH)

    *dir_names, file_name = path
    directory = tree
    names = []
    for dir_name in dir_names:
        name = _text(dir_name, Kind.DIR_NAME_NOT_A_STRING, Kind.DIR_NAME_INVALID_UTF8)
        names.append(name)
        child = directory.setdefault(name, {})
        if isinstance(child, FileNode):
            raise DecodeError(Kind.DUPLICATE_FILE_NAME, name)
        directory = child

    name = _text(file_name, Kind.FILE_NAME_NOT_A_STRING, Kind.FILE_NAME_INVALID_UTF8)
    if name in directory:
        raise DecodeError(Kind.DUPLICATE_FILE_NAME, name)
    directory[name] = FileNode(length)
    return (*names, name), length


def _contents(info: dict, name: str) -> tuple[DirTreeNode, tuple[TorrentFile, ...]]:
    if (length := info.get(b"length")) is not None:
        length = _number(length, Kind.LENGTH_NOT_A_NUMBER, Kind.LENGTH_OUT_OF_RANGE, U64_MAX)
        return FileNode(length), (TorrentFile((name,), length, 0),)

    if (files := info.get(b"files")) is None:
        raise DecodeError(Kind.NEITHER_LENGTH_OR_FILES_PRESENT)

    # directories are plain dicts while building, frozen once every entry is in
    tree: dict = {}
    listed = []
    offset = 0
    for entry in _expect(files, LIST, Kind.FILES_NOT_A_LIST):
        path, length = _add_file(tree, entry)
        # offsets follow list order, that is the order the pieces hash the files in
        listed.append(TorrentFile((name, *path), length, offset))
        offset += length
    return freeze(tree), tuple(listed)


def decode(metainfo) -> TorrentMetadata:
    """
    Turn a bencode value tree into a ``TorrentMetadata``.

    Raises ``DecodeError`` for the first violation found; nothing is returned
    for a partially valid torrent.
    """
    metainfo = _expect(metainfo, DICT, Kind.NOT_A_DICT)

    trackers = _trackers(metainfo)
    nodes = _nodes(metainfo)
    urllist, httpseeds = _web_seeds(metainfo)

    info = _info_dict(metainfo)

    merkle_root = None
    if (root_hash := info.get(b"root hash")) is not None:
        raw = _expect(root_hash, BYTES, Kind.ROOT_HASH_NOT_A_STRING)
        try:
            merkle_root = Sha1Hash.from_buffer(raw)
        except InvalidHashLength as e:
            raise DecodeError(Kind.ROOT_HASH_INVALID_HASH_LENGTH, e.length) from e

    private = False
    if (flag := info.get(b"private")) is not None:
        private = _expect(flag, NUMBER, Kind.PRIVATE_FLAG_NOT_A_NUMBER) != 0

    if (name := info.get(b"name")) is None:
        raise DecodeError(Kind.NAME_NOT_PRESENT)
    name = _text(name, Kind.NAME_NOT_A_STRING, Kind.NAME_INVALID_UTF8)

    if (piece_length := info.get(b"piece length")) is None:
        raise DecodeError(Kind.PIECE_LENGTH_NOT_PRESENT)
    piece_length = _number(
        piece_length,
        Kind.PIECE_LENGTH_NOT_A_NUMBER,
        Kind.PIECE_LENGTH_OUT_OF_RANGE,
        U64_MAX,
    )

    pieces = _pieces(info)
    contents, files = _contents(info, name)
    info_hash = Sha1Hash.from_buffer(hashlib.sha1(bencodepy.encode(info)).digest())

    metadata = TorrentMetadata(
        trackers=trackers,
        nodes=nodes,
        httpseeds=httpseeds,
        urllist=urllist,
        private=private,
        piece_length=piece_length,
        pieces=pieces,
        merkle_root=merkle_root,
        filename=name,
        contents=contents,
        files=files,
        info_hash=info_hash,
    )
    kind = "multi-file" if metadata.is_multi_file else "single-file"
    logger.info(
        f"Decoded {kind} torrent: {name} ({len(pieces)} pieces, {metadata.total_length} bytes)"
    )
    return metadata


def decode_bytes(data: bytes) -> TorrentMetadata:
    try:
        metainfo = bencodepy.decode(data)
    except bencodepy.BencodeDecodeError as e:
        logger.debug(f"Rejected input: not valid bencode ({e})")
        raise InvalidBencodeError(f"not valid bencode: {e}", e) from e

    try:
        return decode(metainfo)
    except DecodeError as e:
        logger.debug(f"Rejected input: {e.kind.name}")
        raise InvalidTorrentError(f"invalid torrent: {e}", e) from e


def decode_file(path: Path | str) -> TorrentMetadata:
    path = Path(path)
    logger.info(f"Parsing torrent file: {path}")

    try:
        with path.open("rb") as f:
            data = f.read()
    except OSError as e:
        raise TorrentReadError(f"could not read {path}: {e}", e) from e

    return decode_bytes(data)


parse_torrent_file = decode_file
