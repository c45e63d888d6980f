"""Exceptions raised while loading and navigating descriptor trees."""

__all__ = [
    "AttributeReadError",
    "EmptyPathError",
    "FormatError",
    "IndexOutOfRangeError",
    "InvalidNameError",
    "NexploreError",
    "NotIndexableError",
    "OpenError",
    "PathError",
    "UnknownEntityKindError",
]


class NexploreError(Exception):
    """Base class for nexplore errors."""


class OpenError(NexploreError, OSError):
    """Raised when a file cannot be opened as an HDF5 container."""


class InvalidNameError(NexploreError, ValueError):
    """Raised when a path has no file-name component."""


class UnknownEntityKindError(NexploreError):
    """Raised when a link resolves to neither a group nor a dataset."""

    def __init__(self, name: str, parent: str = "") -> None:
        self.name = name
        self.parent = parent
        where = f" in '{parent}'" if parent else ""
        super().__init__(f"Found link to entity of unknown kind: '{name}'{where}")


class FormatError(NexploreError):
    """Raised when a dataset does not expose consistent shape, layout or type."""


class AttributeReadError(NexploreError):
    """Raised when a listed attribute cannot be read.

    Never escapes a load: the attribute extractor drops the attribute.
    """

    def __init__(self, name: str, reason: object = None) -> None:
        self.name = name
        msg = f"Could not read attribute '{name}'"
        if reason is not None:
            msg += f": {reason}"
        super().__init__(msg)


class PathError(NexploreError, LookupError):
    """Base class for index path resolution errors."""


class EmptyPathError(PathError):
    """Raised when resolving an empty index path."""

    def __init__(self) -> None:
        super().__init__("Index was empty")


class IndexOutOfRangeError(PathError, IndexError):
    """Raised when an index in the path has no entity."""

    def __init__(self, index: int, depth: int, size: int) -> None:
        self.index = index
        self.depth = depth
        super().__init__(
            f"No entity at index {index} (position {depth} in path, {size} available)"
        )


class NotIndexableError(PathError, TypeError):
    """Raised when the path continues past a dataset."""

    def __init__(self, name: str, depth: int) -> None:
        self.name = name
        self.depth = depth
        super().__init__(f"Cannot index into a dataset: '{name}' (position {depth} in path)")
