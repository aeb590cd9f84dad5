import io
import struct
import sys

import pytest

from enbt.nbt_writer import NBTWriter, TagId


class _Reader:
    def __init__(self, data):
        self.data = data
        self.pos = 0

    def take(self, fmt):
        size = struct.calcsize(fmt)
        (value,) = struct.unpack_from(fmt, self.data, self.pos)
        self.pos += size
        return value

    def text(self):
        length = self.take(">H")
        raw = self.data[self.pos:self.pos + length]
        self.pos += length
        return raw.decode("utf-8")

    def payload(self, tag):
        scalar = {1: ">b", 2: ">h", 3: ">i", 4: ">q", 5: ">f", 6: ">d"}
        if tag in scalar:
            return self.take(scalar[tag])
        if tag == 8:
            return self.text()
        if tag == 9:
            element = self.take(">B")
            size = self.take(">i")
            return [self.payload(element) for _ in range(size)]
        if tag == 10:
            result = {}
            while True:
                child = self.take(">B")
                if child == 0:
                    return result
                name = self.text()
                result[name] = self.payload(child)
        arrays = {7: 1, 11: 3, 12: 4}
        if tag in arrays:
            size = self.take(">i")
            return [self.payload(arrays[tag]) for _ in range(size)]
        raise AssertionError(f"unknown tag {tag}")


def _parse(data):
    reader = _Reader(data)
    assert reader.take(">B") == 10
    reader.text()
    root = reader.payload(10)
    return root, data[reader.pos:]


def _written(build):
    sink = io.BytesIO()
    writer = NBTWriter(sink)
    build(writer)
    count = writer.close()
    data = sink.getvalue()
    assert count == len(data)
    return data


def test_empty_document_bytes():
    assert _written(lambda w: None) == b"\x0a\x00\x00\x00"


def test_scalars_round_trip():
    def build(w):
        w.write_byte("b", 7)
        w.write_short("s", -300)
        w.write_int("i", 123456)
        w.write_long("l", -(2**40))
        w.write_float("f", 0.5)
        w.write_double("d", 2.25)
        w.write_string("str", "héllo")

    root, rest = _parse(_written(build))
    assert root == {
        "b": 7, "s": -300, "i": 123456, "l": -(2**40),
        "f": 0.5, "d": 2.25, "str": "héllo",
    }
    assert rest == b""


def test_server_list_like_command():
    servers = [("one", "ic1", "1.1.1.1", True), ("two", "ic2", "2.2.2.2", False)]

    def build(w):
        w.write_list_head("servers", TagId.COMPOUND, len(servers))
        for name, icon, ip, accept in servers:
            w.write_compound("")
            w.write_string("name", name)
            w.write_string("icon", icon)
            w.write_string("ip", ip)
            w.write_byte("acceptTextures", accept)
            w.end_compound()
        assert w.is_empty()
        w.end_compound()

    root, rest = _parse(_written(build))
    assert root["servers"] == [
        {"name": n, "icon": i, "ip": ip, "acceptTextures": int(a)}
        for n, i, ip, a in servers
    ]
    assert rest == b"\x00"


def test_list_closes_after_declared_elements():
    sink = io.BytesIO()
    writer = NBTWriter(sink)
    writer.write_list_head("nums", TagId.INT, 3)
    assert writer.current_type() == TagId.INT
    for value in (1, 2, 3):
        writer.write_int("", value)
    assert writer.is_empty()
    writer.write_string("after", "x")
    writer.close()
    root, _ = _parse(sink.getvalue())
    assert root == {"nums": [1, 2, 3], "after": "x"}


def test_type_mismatch_in_list_writes_nothing():
    sink = io.BytesIO()
    writer = NBTWriter(sink)
    writer.write_list_head("nums", TagId.INT, 1)
    before = writer.byte_count()
    assert writer.write_string("x", "y") == 0
    assert writer.write_short("x", 1) == 0
    assert writer.byte_count() == before
    assert writer.current_type() == TagId.INT


def test_empty_list_closes_immediately():
    sink = io.BytesIO()
    writer = NBTWriter(sink)
    writer.write_list_head("none", TagId.STRING, 0)
    assert writer.is_empty()
    writer.close()
    root, _ = _parse(sink.getvalue())
    assert root == {"none": []}


def test_arrays_round_trip():
    def build(w):
        w.write_byte_array_head("ba", 2)
        w.write_byte("", 1)
        w.write_byte("", -2)
        w.write_int_array_head("ia", 2)
        w.write_int("", 10)
        w.write_int("", -20)
        w.write_long_array_head("la", 1)
        w.write_long("", 2**50)
        assert w.is_empty()

    root, _ = _parse(_written(build))
    assert root == {"ba": [1, -2], "ia": [10, -20], "la": [2**50]}


def test_nested_lists():
    def build(w):
        w.write_list_head("outer", TagId.LIST, 2)
        w.write_list_head("", TagId.SHORT, 1)
        w.write_short("", 5)
        w.write_list_head("", TagId.SHORT, 2)
        w.write_short("", 6)
        w.write_short("", 7)
        assert w.is_empty()

    root, _ = _parse(_written(build))
    assert root == {"outer": [[5], [6, 7]]}


def test_returned_counts_sum_to_byte_count():
    sink = io.BytesIO()
    writer = NBTWriter(sink)
    total = writer.byte_count()
    total += writer.write_compound("c")
    total += writer.write_int("i", 1)
    total += writer.write_string("s", "abc")
    total += writer.end_compound()
    assert total == writer.byte_count() == len(sink.getvalue())


def test_emergency_fill_completes_list():
    sink = io.BytesIO()
    writer = NBTWriter(sink)
    writer.write_list_head("items", TagId.STRING, 2)
    writer.write_string("", "a")
    writer.close()
    assert writer.is_empty()
    root, _ = _parse(sink.getvalue())
    assert len(root["items"]) == 2
    assert root["items"][0] == "a"
    assert len(set(root) - {"items"}) == 1


def test_emergency_fill_closes_nested_compound():
    sink = io.BytesIO()
    writer = NBTWriter(sink)
    writer.write_compound("a")
    writer.write_int("x", 9)
    writer.write_list_head("ls", TagId.COMPOUND, 1)
    writer.close()
    root, _ = _parse(sink.getvalue())
    assert root["a"]["x"] == 9
    assert root["a"]["ls"] == [{}]


def test_emergency_fill_disabled():
    writer = NBTWriter(io.BytesIO())
    writer.allow_emergency_fill = False
    writer.write_list_head("nums", TagId.INT, 2)
    assert writer.emergency_fill() == 0
    assert writer.current_type() == TagId.INT


def test_unopened_writer():
    writer = NBTWriter()
    assert not writer.is_open
    assert writer.write_compound("c") == 0
    assert writer.end_compound() == 0
    with pytest.raises(ValueError):
        writer.write_int("i", 1)


def test_open_and_context_manager(tmp_path):
    target = tmp_path / "out.dat"
    with NBTWriter() as writer:
        writer.open(target)
        writer.write_string("k", "v")
    root, _ = _parse(target.read_bytes())
    assert root == {"k": "v"}
    assert not writer.is_open


def test_close_twice_keeps_count():
    writer = NBTWriter(io.BytesIO())
    first = writer.close()
    assert writer.close() == first


def test_stdout_output(capsysbinary):
    writer = NBTWriter("ignored", stdout_output=True)
    writer.write_int("n", 42)
    writer.close()
    root, _ = _parse(capsysbinary.readouterr().out)
    assert root == {"n": 42}


def test_write_long_directly_uses_host_order():
    value = int.from_bytes((42).to_bytes(8, "big"), sys.byteorder)
    root, _ = _parse(_written(lambda w: w.write_long_directly("l", value)))
    assert root == {"l": 42}


def test_byte_values_wrap_and_accept_bool():
    def build(w):
        w.write_byte("wrapped", 255)
        w.write_byte("flag", True)

    root, _ = _parse(_written(build))
    assert root == {"wrapped": -1, "flag": 1}


def test_name_too_long():
    writer = NBTWriter(io.BytesIO())
    with pytest.raises(ValueError):
        writer.write_int("x" * 40000, 1)


def test_current_type_at_root_is_end():
    writer = NBTWriter(io.BytesIO())
    assert writer.current_type() == TagId.END
    writer.write_compound("c")
    assert writer.current_type() == TagId.END
    assert not writer.is_empty()