"""Build descriptor trees from HDF5 files.

Usage:
    from nexplore import load

    info = load("scan_0042.nxs")

    print(info.name, info.size)   # file name and size in bytes
    print(info.entities)          # top-level GroupInfo / DatasetInfo nodes
    print(info.entity([0, 1]))    # second child of the first entry

The whole file is walked once, depth first, while it is open. Everything the
tree needs is copied out of h5py immediately, so the result survives closing
the file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import h5py
from pydantic import ValidationError

from nexplore.errors import (
    AttributeReadError,
    FormatError,
    InvalidNameError,
    UnknownEntityKindError,
)
from nexplore.storage import reader
from nexplore.storage.format import ROOT_LINK_KIND
from nexplore.storage.reader import Reader
from nexplore.utils.dtypes import describe_dtype, render_attr
from nexplore.utils.schema import (
    ChunkedLayout,
    CompactLayout,
    ContiguousLayout,
    DatasetInfo,
    EntityInfo,
    FileInfo,
    GroupInfo,
    LinkKind,
    VirtualLayout,
)

logger = logging.getLogger(__name__)

_LINK_KINDS = {
    h5py.HardLink: LinkKind.HARD,
    h5py.SoftLink: LinkKind.SOFT,
    h5py.ExternalLink: LinkKind.EXTERNAL,
}


def classify_link(link: Any) -> LinkKind:
    """Map an h5py link object (or link class) to a LinkKind."""
    link_type = link if isinstance(link, type) else type(link)
    return _LINK_KINDS[link_type]


def get_attrs(obj: h5py.HLObject) -> dict[str, str]:
    """Read all attributes of a group or dataset as display strings.

    A failure to list attributes yields an empty mapping. An attribute that is
    listed but cannot be read is left out.
    """
    attrs: dict[str, str] = {}
    try:
        names = reader.attr_names(obj)
    except (OSError, RuntimeError, TypeError) as e:
        logger.warning("Could not list attributes of %s: %s", obj.name, e)
        return attrs

    for name in names:
        try:
            attrs[name] = render_attr(reader.read_attr(obj, name))
        except AttributeReadError as e:
            logger.warning("%s on %s, skipping", e, obj.name)
    return attrs


def _last_segment(path: str | None) -> str:
    if not path:
        return ""
    return path.rstrip("/").split("/")[-1]


def build_dataset(dataset: h5py.Dataset, link_kind: LinkKind) -> DatasetInfo:
    """Describe a dataset reached through a link of the given kind.

    Raises:
        FormatError: If shape, layout or element type cannot be read, or
            they are inconsistent with each other.
    """
    name = _last_segment(dataset.name)
    try:
        shape = reader.shape(dataset)
        tag = reader.layout(dataset)
        if tag == "chunked":
            layout_info = ChunkedLayout(
                chunk_shape=reader.chunk_shape(dataset),
                filters=tuple(reader.filters(dataset)),
            )
        elif tag == "compact":
            layout_info = CompactLayout()
        elif tag == "contiguous":
            layout_info = ContiguousLayout()
        else:
            layout_info = VirtualLayout()
        dtype_descr = describe_dtype(reader.element_type(dataset))
    except FormatError:
        raise
    except (OSError, RuntimeError, TypeError, ValueError) as e:
        raise FormatError(f"Could not describe dataset '{dataset.name}': {e}") from e

    try:
        info = DatasetInfo(
            name=name,
            identifier=dataset.id.id,
            link_kind=link_kind,
            shape=shape,
            layout_info=layout_info,
            dtype_descr=dtype_descr,
            attrs=get_attrs(dataset),
        )
    except ValidationError as e:
        raise FormatError(f"Inconsistent dataset '{dataset.name}': {e}") from e

    logger.debug("Dataset %s shape=%s layout=%s", dataset.name, shape, tag)
    return info


def build_group(
    group: h5py.Group,
    link_kind: LinkKind,
    ancestors: frozenset[h5py.Group] = frozenset(),
) -> GroupInfo:
    """Describe a group and, recursively, everything below it.

    Children keep h5py's iteration order. A child that is neither a group nor
    a dataset aborts the whole build.

    Args:
        group: Open h5py group.
        link_kind: How the parent refers to this group.
        ancestors: Groups on the current descent path, used to stop at links
            that lead back up the tree.

    Raises:
        UnknownEntityKindError: If a child link resolves to something else.
        FormatError: If a dataset below this group is malformed.
    """
    name = _last_segment(group.name)
    attrs = get_attrs(group)

    if group in ancestors:
        logger.warning("Link %s leads back to an ancestor group, not descending", group.name)
        return GroupInfo(
            name=name,
            identifier=group.id.id,
            link_kind=link_kind,
            attrs=attrs,
            cyclic=True,
        )

    lineage = ancestors | {group}
    entities: list[EntityInfo] = []
    for key, link in reader.iter_links(group):
        kind = classify_link(link)
        child = reader.open_child(group, key)
        if isinstance(child, h5py.Group):
            entities.append(build_group(child, kind, lineage))
        elif isinstance(child, h5py.Dataset):
            entities.append(build_dataset(child, kind))
        else:
            raise UnknownEntityKindError(key, group.name)

    logger.debug("Group %s with %d entities", group.name or "/", len(entities))
    return GroupInfo(
        name=name,
        identifier=group.id.id,
        link_kind=link_kind,
        entities=tuple(entities),
        attrs=attrs,
    )


def load(path: str | Path) -> FileInfo:
    """Open an HDF5 file and build its descriptor tree.

    Args:
        path: Path to the file.

    Returns:
        FileInfo holding the file name, its size and the root's children.

    Raises:
        InvalidNameError: If the path has no file name.
        OpenError: If the file is missing or not HDF5.
        UnknownEntityKindError: If any link resolves to neither group nor dataset.
        FormatError: If any dataset is malformed.
    """
    path = Path(path)
    name = path.name
    if name in ("", ".", ".."):
        raise InvalidNameError(f"No file in path: '{path}'")

    with Reader(path) as r:
        size = r.size
        root = build_group(r.root, LinkKind(ROOT_LINK_KIND))

    logger.debug("Loaded %s (%d bytes, %d top-level entities)", name, size, len(root.entities))
    return FileInfo(name=name, size=size, entities=root.entities)
