"""Postings list representations.

Every representation keeps the same observable contract: a strictly
ascending, duplicate-free set of document ids. The query engine only talks to
the ``PostingsList`` protocol so either backend can be swapped in:

* ``BitmapPostings`` - bit buffer; intersection is a bitwise AND and
  membership a single bit test. Default for larger corpora.
* ``SortedArrayPostings`` - ``array("I")`` kept in ascending order;
  intersection is the two-cursor merge in ``intersect_sorted``.
"""

from __future__ import annotations

from array import array
from bisect import bisect_left
from collections.abc import Iterable, Iterator, Sequence
from typing import Protocol, runtime_checkable

from cercami.domain.model import MAX_DOC_ID


@runtime_checkable
class PostingsList(Protocol):
    """Protocol implemented by postings representations."""

    def add(self, doc_id: int) -> None:  # pragma: no cover - interface definition
        ...

    def contains(self, doc_id: int) -> bool:  # pragma: no cover - interface definition
        ...

    def intersect(self, other: PostingsList) -> PostingsList:  # pragma: no cover - interface definition
        ...

    def cardinality(self) -> int:  # pragma: no cover - interface definition
        ...

    def to_ordered_ids(self) -> Iterator[int]:  # pragma: no cover - interface definition
        ...


def _check_doc_id(doc_id: int) -> int:
    if not 0 <= doc_id <= MAX_DOC_ID:
        raise ValueError(f"Document id {doc_id} outside [0, {MAX_DOC_ID}]")
    return doc_id


def intersect_sorted(a: Sequence[int], b: Sequence[int]) -> array:
    """Intersect two ascending, duplicate-free sequences with a two-cursor merge."""
    result = array("I")
    i = j = 0
    len_a, len_b = len(a), len(b)
    while i < len_a and j < len_b:
        left, right = a[i], b[j]
        if left == right:
            result.append(left)
            i += 1
            j += 1
        elif left < right:
            i += 1
        else:
            j += 1
    return result


class _PostingsBase:
    """Shared dunder conveniences built on the protocol methods."""

    __slots__ = ()

    def __len__(self) -> int:
        return self.cardinality()  # type: ignore[attr-defined]

    def __iter__(self) -> Iterator[int]:
        return self.to_ordered_ids()  # type: ignore[attr-defined]

    def __contains__(self, doc_id: object) -> bool:
        return isinstance(doc_id, int) and self.contains(doc_id)  # type: ignore[attr-defined]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PostingsList):
            return NotImplemented
        return list(self.to_ordered_ids()) == list(other.to_ordered_ids())  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self.to_ordered_ids())!r})"  # type: ignore[attr-defined]


class SortedArrayPostings(_PostingsBase):
    """Postings stored as an ascending ``array("I")``."""

    __slots__ = ("_ids",)

    def __init__(self, doc_ids: Iterable[int] = ()) -> None:
        self._ids = array("I")
        for doc_id in doc_ids:
            self.add(doc_id)

    @classmethod
    def _from_sorted(cls, ids: array) -> SortedArrayPostings:
        postings = cls()
        postings._ids = ids
        return postings

    def add(self, doc_id: int) -> None:
        _check_doc_id(doc_id)
        ids = self._ids
        # Corpus ids arrive in ascending order, so appending is the common path.
        if not ids or ids[-1] < doc_id:
            ids.append(doc_id)
            return
        index = bisect_left(ids, doc_id)
        if ids[index] != doc_id:
            ids.insert(index, doc_id)

    def contains(self, doc_id: int) -> bool:
        ids = self._ids
        index = bisect_left(ids, doc_id)
        return index < len(ids) and ids[index] == doc_id

    def intersect(self, other: PostingsList) -> SortedArrayPostings:
        if isinstance(other, SortedArrayPostings):
            return self._from_sorted(intersect_sorted(self._ids, other._ids))
        if self.cardinality() <= other.cardinality():
            kept = (doc_id for doc_id in self._ids if other.contains(doc_id))
        else:
            kept = (doc_id for doc_id in other.to_ordered_ids() if self.contains(doc_id))
        return self._from_sorted(array("I", kept))

    def cardinality(self) -> int:
        return len(self._ids)

    def to_ordered_ids(self) -> Iterator[int]:
        return iter(self._ids)


# Set-bit offsets for every byte value, low bit first.
_BYTE_OFFSETS: tuple[tuple[int, ...], ...] = tuple(
    tuple(offset for offset in range(8) if value >> offset & 1) for value in range(256)
)
_SCAN_CHUNK = 4096


class BitmapPostings(_PostingsBase):
    """Postings stored as a little-endian bit buffer.

    Bits are set in place in a ``bytearray``. The integer form used for AND
    and popcount is cached until the next ``add``.
    """

    __slots__ = ("_buffer", "_bits")

    def __init__(self, doc_ids: Iterable[int] = ()) -> None:
        self._buffer = bytearray()
        self._bits: int | None = 0
        for doc_id in doc_ids:
            self.add(doc_id)

    @classmethod
    def _from_bits(cls, bits: int) -> BitmapPostings:
        postings = cls()
        postings._buffer = bytearray(bits.to_bytes((bits.bit_length() + 7) // 8, "little"))
        postings._bits = bits
        return postings

    def _as_int(self) -> int:
        bits = self._bits
        if bits is None:
            bits = self._bits = int.from_bytes(self._buffer, "little")
        return bits

    def add(self, doc_id: int) -> None:
        _check_doc_id(doc_id)
        buffer = self._buffer
        index = doc_id >> 3
        if index >= len(buffer):
            buffer.extend(bytes(index + 1 - len(buffer)))
        mask = 1 << (doc_id & 7)
        if not buffer[index] & mask:
            buffer[index] |= mask
            self._bits = None

    def contains(self, doc_id: int) -> bool:
        if doc_id < 0:
            return False
        buffer = self._buffer
        index = doc_id >> 3
        return index < len(buffer) and bool(buffer[index] >> (doc_id & 7) & 1)

    def intersect(self, other: PostingsList) -> BitmapPostings:
        if isinstance(other, BitmapPostings):
            return self._from_bits(self._as_int() & other._as_int())
        if self.cardinality() <= other.cardinality():
            kept = [doc_id for doc_id in self.to_ordered_ids() if other.contains(doc_id)]
        else:
            kept = [doc_id for doc_id in other.to_ordered_ids() if self.contains(doc_id)]
        return type(self)(kept)

    def cardinality(self) -> int:
        return self._as_int().bit_count()

    def to_ordered_ids(self) -> Iterator[int]:
        buffer = self._buffer
        offsets = _BYTE_OFFSETS
        size = len(buffer)
        for start in range(0, size, _SCAN_CHUNK):
            end = min(start + _SCAN_CHUNK, size)
            # All-zero chunks are skipped at C speed.
            if buffer.count(0, start, end) == end - start:
                continue
            for index in range(start, end):
                byte = buffer[index]
                if byte:
                    base = index << 3
                    for offset in offsets[byte]:
                        yield base + offset


_POSTINGS_FACTORIES: dict[str, type[BitmapPostings] | type[SortedArrayPostings]] = {
    "bitmap": BitmapPostings,
    "sorted-array": SortedArrayPostings,
}


def get_postings_factory(name: str | None) -> type[BitmapPostings] | type[SortedArrayPostings]:
    """Return the postings class registered under ``name`` (default: bitmap)."""

    if name is None:
        return _POSTINGS_FACTORIES["bitmap"]
    normalized = name.lower()
    if normalized not in _POSTINGS_FACTORIES:
        msg = f"Unknown postings backend '{name}'. Available: {sorted(_POSTINGS_FACTORIES)}"
        raise ValueError(msg)
    return _POSTINGS_FACTORIES[normalized]
