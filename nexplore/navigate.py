"""Navigate a loaded descriptor tree by index path or by name.

An index path is a sequence of child positions starting at the file's
top-level entities: ``[0]`` is the first top-level entry, ``[0, 2]`` the
third child of that entry.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence

from nexplore.errors import EmptyPathError, IndexOutOfRangeError, NotIndexableError
from nexplore.utils.schema import DatasetInfo, FileInfo, GroupInfo


def _child(entities: Sequence[GroupInfo | DatasetInfo], idx: int, depth: int) -> GroupInfo | DatasetInfo:
    if idx < 0 or idx >= len(entities):
        raise IndexOutOfRangeError(idx, depth, len(entities))
    return entities[idx]


def resolve(file_info: FileInfo, path: Sequence[int]) -> GroupInfo | DatasetInfo:
    """Return a copy of the entity at an index path.

    Raises:
        EmptyPathError: If the path is empty.
        IndexOutOfRangeError: If any index has no entity.
        NotIndexableError: If the path continues past a dataset.
    """
    indices = list(path)
    if not indices:
        raise EmptyPathError()

    entity = _child(file_info.entities, indices[0], 0)
    for depth, idx in enumerate(indices[1:], start=1):
        if isinstance(entity, DatasetInfo):
            raise NotIndexableError(entity.name, depth)
        entity = _child(entity.entities, idx, depth)
    return entity.model_copy(deep=True)


def walk(file_info: FileInfo) -> Iterator[tuple[tuple[int, ...], tuple[str, ...], GroupInfo | DatasetInfo]]:
    """Yield ``(index_path, name_path, entity)`` for every node, pre-order."""
    stack = [((i,), (e.name,), e) for i, e in enumerate(file_info.entities)]
    stack.reverse()
    while stack:
        index_path, name_path, entity = stack.pop()
        yield index_path, name_path, entity
        if isinstance(entity, GroupInfo):
            children = [
                (index_path + (i,), name_path + (child.name,), child)
                for i, child in enumerate(entity.entities)
            ]
            stack.extend(reversed(children))


def find(
    file_info: FileInfo,
    pattern: str,
    ignore_case: bool = False,
) -> list[tuple[tuple[int, ...], tuple[str, ...], GroupInfo | DatasetInfo]]:
    """Find entities whose name matches a regular expression.

    Args:
        file_info: Loaded tree.
        pattern: Regular expression, matched anywhere in the name.
        ignore_case: Match case-insensitively.

    Returns:
        Matches in pre-order, as produced by :func:`walk`.
    """
    regex = re.compile(pattern, re.IGNORECASE if ignore_case else 0)
    return [item for item in walk(file_info) if regex.search(item[2].name)]
