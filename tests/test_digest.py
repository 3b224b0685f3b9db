import pytest

from turbometa.torrent.digest import InvalidHashLength, Sha1Hash


def test_from_buffer_rejects_19_bytes():
    with pytest.raises(InvalidHashLength) as excinfo:
        Sha1Hash.from_buffer(b"\x00" * 19)
    assert excinfo.value.length == 19


@pytest.mark.parametrize("length", [0, 21, 40])
def test_from_buffer_rejects_other_lengths(length):
    with pytest.raises(InvalidHashLength) as excinfo:
        Sha1Hash.from_buffer(b"x" * length)
    assert excinfo.value.length == length


def test_hex_rendering_is_40_lowercase_chars():
    data = bytes(range(0xEC, 0x100))
    h = Sha1Hash.from_buffer(data)

    assert str(h) == data.hex()
    assert len(str(h)) == 40
    assert str(h) == str(h).lower()
    assert str(h).startswith("ecedeeef")


def test_equality_is_bytewise():
    a = Sha1Hash.from_buffer(b"a" * 20)
    assert a == Sha1Hash.from_buffer(b"a" * 20)
    assert a != Sha1Hash.from_buffer(b"a" * 19 + b"b")
    assert hash(a) == hash(Sha1Hash.from_buffer(b"a" * 20))
    assert a != b"a" * 20


def test_copies_the_input_and_is_immutable():
    buf = bytearray(b"z" * 20)
    h = Sha1Hash.from_buffer(buf)
    buf[0] = 0
    assert h.digest == b"z" * 20
    assert bytes(h) == b"z" * 20

    with pytest.raises(AttributeError):
        h._digest = b"y" * 20
