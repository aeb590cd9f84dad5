"""Streaming writer for the big-endian NBT binary format."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import BinaryIO

_ROOT_HEADER = bytes((10, 0, 0))
_MAX_NAME_LENGTH = 0x7FFF

_FILL_WARNING_NAME = "EmergencyFillWarning"
_FILL_WARNING_TEXT = (
    "There's sth wrong with ur NBTWriter, the file format is completed "
    "automatically instead of manually."
)


class TagId(IntEnum):
    """NBT tag type identifiers."""

    END = 0
    BYTE = 1
    SHORT = 2
    INT = 3
    LONG = 4
    FLOAT = 5
    DOUBLE = 6
    BYTE_ARRAY = 7
    STRING = 8
    LIST = 9
    COMPOUND = 10
    INT_ARRAY = 11
    LONG_ARRAY = 12


@dataclass
class _Frame:
    """An open container: element type (END for a compound) and items left."""

    element_type: int
    remaining: int


def _int_bytes(value: int, size: int, byteorder: str = "big") -> bytes:
    """Encode an integer in ``size`` bytes, wrapping like a C integer cast."""
    return (int(value) & ((1 << (8 * size)) - 1)).to_bytes(size, byteorder)


def _sized_text(text: str | bytes) -> bytes:
    """Encode a name or string value with its two-byte length prefix."""
    raw = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    if len(raw) > _MAX_NAME_LENGTH:
        raise ValueError(f"text of {len(raw)} bytes exceeds {_MAX_NAME_LENGTH}")
    return _int_bytes(len(raw), 2) + raw


class NBTWriter:
    """Write an NBT document tag by tag, tracking nested lists and compounds.

    The writer emits the root compound header on opening and its end tag on
    closing.  Inside a list, tag names are dropped and only payloads of the
    list's element type are written; a list closes itself once all of its
    declared elements have been written.
    """

    def __init__(
        self,
        path: str | os.PathLike[str] | BinaryIO | None = None,
        stdout_output: bool = False,
    ) -> None:
        self.stdout_output = stdout_output
        self.allow_emergency_fill = True
        self._stack: list[_Frame] = []
        self._byte_count = 0
        self._sink: BinaryIO | None = None
        self._owns_sink = False
        self._is_open = False
        if path is not None or stdout_output:
            self._start(path)

    # -- lifecycle -------------------------------------------------------

    def __enter__(self) -> NBTWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        """Whether the writer currently has an output to write to."""
        return self._is_open

    def _start(self, path) -> None:
        if self.stdout_output:
            self._sink = sys.stdout.buffer
            self._owns_sink = False
        elif hasattr(path, "write"):
            self._sink = path
            self._owns_sink = False
        else:
            self._sink = open(path, "wb")
            self._owns_sink = True
        self._is_open = True
        self._put(_ROOT_HEADER)
        self._byte_count += len(_ROOT_HEADER)

    def open(self, path) -> None:
        """Open an output and write the root compound header; no-op if open."""
        if self._is_open:
            return
        self._start(path)

    def close(self) -> int:
        """Complete any unfinished structure, end the root and return the byte count."""
        if self._is_open:
            if not self.is_empty():
                self.emergency_fill()
            self._put(bytes((TagId.END,)))
            self._byte_count += 1
            if self._owns_sink:
                self._sink.close()
            else:
                self._sink.flush()
            self._sink = None
            self._is_open = False
        return self._byte_count

    # -- state -----------------------------------------------------------

    def is_empty(self) -> bool:
        """True when no list, array or nested compound is open."""
        return not self._stack

    def current_type(self) -> TagId:
        """Element type of the innermost open container; END for a compound."""
        if not self._stack:
            return TagId.END
        return TagId(self._stack[-1].element_type)

    def byte_count(self) -> int:
        """Number of bytes written so far."""
        return self._byte_count

    def _in_compound(self) -> bool:
        return not self._stack or self._stack[-1].element_type == TagId.END

    def _in_list(self) -> bool:
        return not self._in_compound()

    def _list_finished(self) -> bool:
        return bool(self._stack) and self._stack[-1].remaining <= 0

    def _type_match(self, type_id: int) -> bool:
        return bool(self._stack) and self._stack[-1].element_type == type_id

    def _push(self, element_type: int, size: int) -> None:
        self._stack.append(_Frame(int(element_type), size))

    def _pop(self) -> None:
        if self._stack:
            self._stack.pop()

    def _end_list(self) -> None:
        if self._in_list() and self._list_finished():
            self._pop()
            self._element_written()

    def _element_written(self) -> None:
        if self._in_list() and not self._list_finished():
            self._stack[-1].remaining -= 1
        if self._list_finished():
            self._end_list()

    def _put(self, data: bytes) -> None:
        if self._sink is None:
            raise ValueError("writer is not open")
        self._sink.write(data)

    # -- tags ------------------------------------------------------------

    def _write_single(self, type_id: TagId, name, payload: bytes) -> int:
        count = 0
        if self._in_compound():
            data = bytes((type_id,)) + _sized_text(name) + payload
            self._put(data)
            count += len(data)
        elif self._type_match(type_id):
            self._put(payload)
            count += len(payload)
            self._element_written()
        self._byte_count += count
        return count

    def _write_container_head(
        self, tag: TagId, element_type: int, name, size: int, prefix: bytes = b""
    ) -> int:
        body = prefix + _int_bytes(size, 4)
        if self._in_compound():
            data = bytes((tag,)) + _sized_text(name) + body
        elif self._type_match(tag):
            data = body
        else:
            return 0
        self._put(data)
        self._push(element_type, size)
        self._byte_count += len(data)
        if size == 0:
            self._element_written()
        return len(data)

    def write_compound(self, name) -> int:
        """Start a compound; inside a list of compounds nothing is written."""
        if not self._is_open:
            return 0
        if self._in_compound():
            data = bytes((TagId.COMPOUND,)) + _sized_text(name)
            self._put(data)
            self._push(TagId.END, 0)
            self._byte_count += len(data)
            return len(data)
        if self._type_match(TagId.COMPOUND):
            self._push(TagId.END, 0)
        return 0

    def end_compound(self) -> int:
        """Write the end tag of the innermost compound."""
        if not self._is_open or not self._in_compound():
            return 0
        self._put(bytes((TagId.END,)))
        self._pop()
        self._element_written()
        self._byte_count += 1
        return 1

    def write_list_head(self, name, type_id, size) -> int:
        """Start a list of ``size`` elements of ``type_id``."""
        return self._write_container_head(
            TagId.LIST, int(type_id), name, size, bytes((int(type_id) & 0xFF,))
        )

    def write_byte(self, name, value) -> int:
        return self._write_single(TagId.BYTE, name, _int_bytes(value, 1))

    def write_short(self, name, value) -> int:
        return self._write_single(TagId.SHORT, name, _int_bytes(value, 2))

    def write_int(self, name, value) -> int:
        return self._write_single(TagId.INT, name, _int_bytes(value, 4))

    def write_long(self, name, value) -> int:
        return self._write_single(TagId.LONG, name, _int_bytes(value, 8))

    def write_long_directly(self, name, value) -> int:
        """Write a long whose bytes go out in host order, unconverted."""
        return self._write_single(
            TagId.LONG, name, _int_bytes(value, 8, sys.byteorder)
        )

    def write_float(self, name, value) -> int:
        import struct

        return self._write_single(TagId.FLOAT, name, struct.pack(">f", value))

    def write_double(self, name, value) -> int:
        import struct

        return self._write_single(TagId.DOUBLE, name, struct.pack(">d", value))

    def write_byte_array_head(self, name, size) -> int:
        """Start a byte array; follow with ``size`` calls to write_byte."""
        return self._write_container_head(TagId.BYTE_ARRAY, TagId.BYTE, name, size)

    def write_int_array_head(self, name, size) -> int:
        """Start an int array; follow with ``size`` calls to write_int."""
        return self._write_container_head(TagId.INT_ARRAY, TagId.INT, name, size)

    def write_long_array_head(self, name, size) -> int:
        """Start a long array; follow with ``size`` calls to write_long."""
        return self._write_container_head(TagId.LONG_ARRAY, TagId.LONG, name, size)

    def write_string(self, name, value) -> int:
        payload = _sized_text(value)
        if self._in_compound():
            data = bytes((TagId.STRING,)) + _sized_text(name) + payload
        elif self._type_match(TagId.STRING):
            data = payload
        else:
            return 0
        self._put(data)
        self._byte_count += len(data)
        self._element_written()
        return len(data)

    def emergency_fill(self) -> int:
        """Fill and close every open container with placeholder values."""
        if not self.allow_emergency_fill or self.is_empty():
            return 0
        fillers = {
            TagId.BYTE: lambda: self.write_byte("autoByte", 114),
            TagId.SHORT: lambda: self.write_short("autoShort", 514),
            TagId.INT: lambda: self.write_int("autoInt", 114514),
            TagId.LONG: lambda: self.write_long("autoLong", 1919810),
            TagId.FLOAT: lambda: self.write_float("autoFloat", 114.514),
            TagId.DOUBLE: lambda: self.write_double("autoDouble", 1919810.114514),
            TagId.BYTE_ARRAY: lambda: self.write_byte_array_head("autoByteArray", 1),
            TagId.STRING: lambda: self.write_string("autoString", "autoString"),
            TagId.LIST: lambda: self.write_list_head("autoList", TagId.INT, 1),
            TagId.COMPOUND: lambda: self.write_compound("autoCompound"),
            TagId.INT_ARRAY: lambda: self.write_int_array_head("autoIntArray", 1),
            TagId.LONG_ARRAY: lambda: self.write_long_array_head("autoLongArray", 1),
        }
        count = 0
        while not self.is_empty():
            if self._in_compound():
                count += self.end_compound()
                continue
            element_type = self._stack[-1].element_type
            filler = fillers.get(element_type)
            if filler is None:
                raise ValueError(f"cannot fill a list of unknown type {element_type}")
            count += filler()
        count += self.write_string(_FILL_WARNING_NAME, _FILL_WARNING_TEXT)
        return count