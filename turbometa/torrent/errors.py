from enum import Enum


class TorrentError(Exception):
    """Base exception for everything raised while loading a torrent."""


class DecodeErrorKind(Enum):
    # value is the human readable reason, the member name is what callers branch on
    NOT_A_DICT = "torrent is not a dictionary"
    ANNOUNCE_LIST_NOT_A_LIST = "'announce-list' is not a list"
    ANNOUNCE_LIST_TIER_NOT_A_LIST = "'announce-list' tier is not a list"
    TRACKER_URL_NOT_A_STRING = "tracker url is not a string"
    TRACKER_URL_INVALID_UTF8 = "tracker url is not valid utf-8"
    TRACKER_URL_PARSE_ERROR = "tracker url could not be parsed"
    ANNOUNCE_URL_NOT_A_STRING = "'announce' is not a string"
    ANNOUNCE_URL_INVALID_UTF8 = "'announce' is not valid utf-8"
    ANNOUNCE_URL_PARSE_ERROR = "'announce' could not be parsed as a url"
    NODE_LIST_NOT_A_LIST = "'nodes' is not a list"
    NODE_NOT_A_LIST = "node is not a list"
    NODE_HOST_NOT_A_STRING = "node host is not a string"
    NODE_HOST_INVALID_UTF8 = "node host is not valid utf-8"
    NODE_HOST_PARSE_ERROR = "node host could not be parsed"
    NODE_PORT_NOT_A_NUMBER = "node port is not a number"
    NODE_PORT_OUT_OF_RANGE = "node port does not fit in 16 bits"
    NODE_INVALID_LIST = "node is not a [host, port] pair"
    URL_LIST_NOT_A_STRING = "'url-list' is not a string"
    URL_LIST_INVALID_UTF8 = "'url-list' is not valid utf-8"
    URL_LIST_PARSE_ERROR = "'url-list' could not be parsed as a url"
    HTTP_SEEDS_NOT_A_LIST = "'httpseeds' is not a list"
    HTTP_SEED_NOT_A_STRING = "http seed is not a string"
    HTTP_SEED_INVALID_UTF8 = "http seed is not valid utf-8"
    HTTP_SEED_PARSE_ERROR = "http seed could not be parsed as a url"
    INFO_DICT_NOT_A_DICT = "'info' is not a dictionary"
    ROOT_HASH_NOT_A_STRING = "'root hash' is not a string"
    ROOT_HASH_INVALID_HASH_LENGTH = "'root hash' is not 20 bytes long"
    PRIVATE_FLAG_NOT_A_NUMBER = "'private' is not a number"
    NAME_NOT_A_STRING = "'name' is not a string"
    NAME_INVALID_UTF8 = "'name' is not valid utf-8"
    NAME_NOT_PRESENT = "'name' is missing"
    PIECE_LENGTH_NOT_A_NUMBER = "'piece length' is not a number"
    PIECE_LENGTH_OUT_OF_RANGE = "'piece length' does not fit in 64 bits"
    PIECE_LENGTH_NOT_PRESENT = "'piece length' is missing"
    INVALID_PIECES_LENGTH = "'pieces' length is not a multiple of 20"
    PIECES_NOT_A_STRING = "'pieces' is not a string"
    PIECES_NOT_PRESENT = "'pieces' is missing"
    LENGTH_NOT_A_NUMBER = "'length' is not a number"
    LENGTH_OUT_OF_RANGE = "'length' does not fit in 64 bits"
    FILES_NOT_A_LIST = "'files' is not a list"
    NEITHER_LENGTH_OR_FILES_PRESENT = "neither 'length' nor 'files' is present"
    FILE_INFO_NOT_A_DICT = "file entry is not a dictionary"
    FILE_LENGTH_NOT_A_NUMBER = "file 'length' is not a number"
    FILE_LENGTH_OUT_OF_RANGE = "file 'length' does not fit in 64 bits"
    FILE_LENGTH_NOT_PRESENT = "file 'length' is missing"
    FILE_PATH_NOT_A_LIST = "file 'path' is not a list"
    FILE_PATH_NOT_PRESENT = "file 'path' is missing"
    DIR_NAME_NOT_A_STRING = "directory name is not a string"
    DIR_NAME_INVALID_UTF8 = "directory name is not valid utf-8"
    FILE_NAME_NOT_A_STRING = "file name is not a string"
    FILE_NAME_INVALID_UTF8 = "file name is not valid utf-8"
    EMPTY_FILE_PATH = "file 'path' is empty"
    DUPLICATE_FILE_NAME = "duplicate file name"


class DecodeError(TorrentError):
    """
    A value tree that does not describe a valid torrent.

    ``kind`` says which check failed. ``detail`` carries the payload of the
    variants that have one: the offending byte count for the length checks,
    or the underlying ``UnicodeDecodeError``/``AddressParseError``.
    """

    def __init__(self, kind: DecodeErrorKind, detail=None):
        self.kind = kind
        self.detail = detail
        message = kind.value if detail is None else f"{kind.value}: {detail}"
        super().__init__(message)

    def __repr__(self):
        return f"DecodeError({self.kind.name}, {self.detail!r})"


class LoadError(TorrentError):
    """Failure of one stage of the file -> bencode -> torrent pipeline."""

    def __init__(self, message: str, cause: Exception):
        super().__init__(message)
        self.cause = cause


class TorrentReadError(LoadError):
    """The input could not be read."""


class InvalidBencodeError(LoadError):
    """The input is not valid bencode."""


class InvalidTorrentError(LoadError):
    """The input is valid bencode but not a valid torrent."""

    def __init__(self, message: str, cause: DecodeError):
        super().__init__(message, cause)
        self.error = cause

    @property
    def kind(self) -> DecodeErrorKind:
        return self.error.kind
