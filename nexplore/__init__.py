"""nexplore — explore HDF5 and NeXus files.

Loads the group/dataset hierarchy of a file into an immutable tree of
descriptors that outlives the open file, and navigates it by index path.

Quick start:
    from nexplore import load

    info = load("scan_0042.nxs")
    print(info.name, info.size)        # file name, bytes
    entry = info.entity([0])           # first top-level entity
    data = info.entity([0, 1])         # its second child

    for node in info.to_view_nodes():  # display projection
        print(node.label)
"""

__version__ = "0.1.0"

from nexplore.errors import (
    EmptyPathError,
    IndexOutOfRangeError,
    NexploreError,
    NotIndexableError,
    OpenError,
    UnknownEntityKindError,
)
from nexplore.navigate import find, resolve, walk
from nexplore.tree import load
from nexplore.utils.schema import DatasetInfo, FileInfo, GroupInfo, LinkKind
from nexplore.view import ViewNode, to_view_node

__all__ = [
    "DatasetInfo",
    "EmptyPathError",
    "FileInfo",
    "GroupInfo",
    "IndexOutOfRangeError",
    "LinkKind",
    "NexploreError",
    "NotIndexableError",
    "OpenError",
    "UnknownEntityKindError",
    "ViewNode",
    "find",
    "load",
    "resolve",
    "to_view_node",
    "walk",
    "__version__",
]
