"""Read-only access to HDF5 files through h5py.

Wraps the handful of h5py calls the tree builder needs: opening the file,
listing links, opening children, reading attributes and the dataset
creation properties (layout, chunking, filters).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import h5py
import numpy as np

from nexplore.errors import AttributeReadError, FormatError, OpenError
from nexplore.storage.format import FILTER_NAMES, ROOT_PATH
from nexplore.utils.schema import FilterInfo

logger = logging.getLogger(__name__)

# h5d layout tags, in the order HDF5 defines them
LAYOUT_NAMES = {
    h5py.h5d.COMPACT: "compact",
    h5py.h5d.CONTIGUOUS: "contiguous",
    h5py.h5d.CHUNKED: "chunked",
    h5py.h5d.VIRTUAL: "virtual",
}


class Reader:
    """Read-only handle on an HDF5 file.

    Opens lazily; the handle is only needed while a tree is being built.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._file: h5py.File | None = None

    def open(self) -> None:
        """Open the file for reading."""
        if not self.path.exists():
            raise OpenError(f"File not found: {self.path}")
        try:
            self._file = h5py.File(str(self.path), "r")
        except OSError as e:
            raise OpenError(f"Could not open {self.path} as HDF5: {e}") from e
        logger.debug("Opened %s", self.path)

    def close(self) -> None:
        """Close the file."""
        if self._file is not None:
            self._file.close()
            self._file = None
            logger.debug("Closed %s", self.path)

    def __enter__(self) -> Reader:
        self.open()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @property
    def file(self) -> h5py.File:
        if self._file is None:
            raise RuntimeError("Reader not opened. Call .open() first.")
        return self._file

    @property
    def size(self) -> int:
        """Total file size in bytes, as reported by HDF5 at open time."""
        return int(self.file.id.get_filesize())

    @property
    def root(self) -> h5py.Group:
        return self.file[ROOT_PATH]


# --- Links ---


def iter_links(group: h5py.Group) -> Iterator[tuple[str, Any]]:
    """Yield ``(name, link)`` for each child of a group in h5py's iteration order.

    ``link`` is an h5py link object (HardLink, SoftLink or ExternalLink).
    """
    for name in group:
        yield name, group.get(name, getlink=True)


def open_child(group: h5py.Group, name: str) -> Any:
    """Resolve a child link, following soft and external links.

    Returns None if the link cannot be resolved (dangling soft link,
    missing external file).
    """
    try:
        return group[name]
    except (KeyError, OSError) as e:
        logger.debug("Could not resolve '%s' in %s: %s", name, group.name, e)
        return None


# --- Attributes ---


def attr_names(obj: h5py.HLObject) -> list[str]:
    """List attribute names of a group or dataset."""
    return list(obj.attrs.keys())


def read_attr(obj: h5py.HLObject, name: str) -> Any:
    """Read one attribute value.

    Raises:
        AttributeReadError: If the value cannot be read or converted.
    """
    try:
        return obj.attrs[name]
    except (OSError, KeyError, TypeError, ValueError) as e:
        raise AttributeReadError(name, e) from e


# --- Dataset creation properties ---


def shape(dataset: h5py.Dataset) -> tuple[int, ...]:
    """Dataset extents; a null dataspace has no extents."""
    if dataset.shape is None:
        return ()
    return tuple(int(n) for n in dataset.shape)


def layout(dataset: h5py.Dataset) -> str:
    """Storage layout tag: compact, contiguous, chunked or virtual."""
    tag = dataset.id.get_create_plist().get_layout()
    try:
        return LAYOUT_NAMES[tag]
    except KeyError:
        raise FormatError(f"Dataset '{dataset.name}' has unknown layout {tag}") from None


def chunk_shape(dataset: h5py.Dataset) -> tuple[int, ...]:
    """Chunk extents of a chunked dataset."""
    chunks = dataset.id.get_create_plist().get_chunk()
    return tuple(int(n) for n in chunks)


def filters(dataset: h5py.Dataset) -> list[FilterInfo]:
    """The dataset's filter pipeline, in application order."""
    dcpl = dataset.id.get_create_plist()
    pipeline = []
    for idx in range(dcpl.get_nfilters()):
        code, flags, values, stored_name = dcpl.get_filter(idx)
        if isinstance(stored_name, bytes):
            stored_name = stored_name.decode("ascii", errors="replace")
        name = FILTER_NAMES.get(code) or stored_name or f"filter-{code}"
        pipeline.append(
            FilterInfo(
                id=int(code),
                name=name,
                cd_values=tuple(int(v) for v in values),
                optional=bool(flags & h5py.h5z.FLAG_OPTIONAL),
            )
        )
    return pipeline


def element_type(dataset: h5py.Dataset) -> np.dtype:
    return dataset.dtype
