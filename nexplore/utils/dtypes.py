"""Element type description and attribute value rendering.

h5py exposes element types as numpy dtypes carrying HDF5-specific metadata
(string encoding, vlen base, enum members, reference class). These helpers
turn them into plain descriptors and display strings that no longer depend on
the open file.
"""

from __future__ import annotations

from typing import Any

import h5py
import numpy as np

from nexplore.storage.format import ATTR_ARRAY_THRESHOLD
from nexplore.utils.schema import CompoundField, TypeDescriptor, TypeKind

_SIMPLE_KINDS = {
    "b": TypeKind.BOOLEAN,
    "i": TypeKind.INTEGER,
    "u": TypeKind.UNSIGNED,
    "f": TypeKind.FLOAT,
    "c": TypeKind.COMPLEX,
}


def describe_dtype(dtype: np.dtype) -> TypeDescriptor:
    """Build a structural TypeDescriptor from an h5py/numpy dtype.

    Args:
        dtype: Element dtype as reported by ``h5py.Dataset.dtype``.

    Returns:
        TypeDescriptor with nested descriptors for compound, array,
        variable-length and enum types.
    """
    dtype = np.dtype(dtype)

    string_info = h5py.check_string_dtype(dtype)
    if string_info is not None:
        unicode = string_info.encoding == "utf-8"
        if string_info.length is None:
            kind = TypeKind.VARLEN_UNICODE if unicode else TypeKind.VARLEN_ASCII
            return TypeDescriptor(kind=kind, size=dtype.itemsize)
        kind = TypeKind.FIXED_UNICODE if unicode else TypeKind.FIXED_ASCII
        return TypeDescriptor(kind=kind, size=string_info.length)

    if h5py.check_ref_dtype(dtype) is not None:
        return TypeDescriptor(kind=TypeKind.REFERENCE, size=dtype.itemsize)

    vlen_base = h5py.check_vlen_dtype(dtype)
    if vlen_base is not None:
        return TypeDescriptor(
            kind=TypeKind.VARLEN_ARRAY,
            size=dtype.itemsize,
            base=describe_dtype(vlen_base),
        )

    members = h5py.check_enum_dtype(dtype)
    if members is not None:
        return TypeDescriptor(
            kind=TypeKind.ENUM,
            size=dtype.itemsize,
            base=describe_dtype(np.dtype(dtype.str)),
            members={str(k): int(v) for k, v in members.items()},
        )

    if dtype.subdtype is not None:
        base, dims = dtype.subdtype
        return TypeDescriptor(
            kind=TypeKind.ARRAY,
            size=dtype.itemsize,
            base=describe_dtype(base),
            dims=tuple(int(d) for d in dims),
        )

    if dtype.names is not None:
        fields = []
        for name in dtype.names:
            field_dtype, offset = dtype.fields[name][:2]
            fields.append(CompoundField(name=name, offset=offset, type=describe_dtype(field_dtype)))
        return TypeDescriptor(kind=TypeKind.COMPOUND, size=dtype.itemsize, fields=tuple(fields))

    kind = _SIMPLE_KINDS.get(dtype.kind, TypeKind.OPAQUE)
    return TypeDescriptor(kind=kind, size=dtype.itemsize)


def _decode(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def render_attr(value: Any) -> str:
    """Render an attribute value read through h5py as a display string.

    Bytes are decoded as UTF-8, string arrays become lists of decoded strings
    and large numeric arrays are summarised by numpy.
    """
    if isinstance(value, (bytes, str)):
        return _decode(value)
    if isinstance(value, np.ndarray):
        if value.dtype.kind in ("S", "O", "U"):
            items = [_decode(v) for v in value.ravel()]
            if len(items) > ATTR_ARRAY_THRESHOLD:
                items = items[:ATTR_ARRAY_THRESHOLD] + ["..."]
            return "[" + ", ".join(items) + "]"
        return np.array2string(value, threshold=ATTR_ARRAY_THRESHOLD, separator=", ")
    if isinstance(value, np.generic):
        return str(value.item())
    return str(value)
