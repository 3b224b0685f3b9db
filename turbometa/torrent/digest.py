HASH_LENGTH = 20


class InvalidHashLength(ValueError):
    def __init__(self, length: int):
        super().__init__(f"expected {HASH_LENGTH} bytes, got {length}")
        self.length = length


class Sha1Hash:
    """160 bit digest, e.g. one piece hash or a merkle root."""

    __slots__ = ("_digest",)

    def __init__(self, digest: bytes):
        if len(digest) != HASH_LENGTH:
            raise InvalidHashLength(len(digest))
        object.__setattr__(self, "_digest", bytes(digest))

    @classmethod
    def from_buffer(cls, data: bytes) -> "Sha1Hash":
        return cls(data)

    @property
    def digest(self) -> bytes:
        return self._digest

    def hex(self) -> str:
        return self._digest.hex()

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other):
        if not isinstance(other, Sha1Hash):
            return NotImplemented
        return self._digest == other._digest

    def __hash__(self):
        return hash(self._digest)

    def __bytes__(self):
        return self._digest

    def __str__(self):
        return self.hex()

    def __repr__(self):
        return f"Sha1Hash({self.hex()})"
