"""Pydantic models for nexplore descriptor trees.

Every model is frozen and owns its data; nothing here refers back to an open
h5py handle, so a tree stays valid after its file is closed.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LinkKind(str, Enum):
    """How a parent group refers to a child."""

    HARD = "Hard"
    SOFT = "Soft"
    EXTERNAL = "External"

    def __str__(self) -> str:
        return self.value


class TypeKind(str, Enum):
    """Element type classes of an HDF5 dataset."""

    INTEGER = "integer"
    UNSIGNED = "unsigned"
    FLOAT = "float"
    COMPLEX = "complex"
    BOOLEAN = "boolean"
    ENUM = "enum"
    COMPOUND = "compound"
    ARRAY = "array"
    VARLEN_ARRAY = "varlen_array"
    FIXED_ASCII = "fixed_ascii"
    FIXED_UNICODE = "fixed_unicode"
    VARLEN_ASCII = "varlen_ascii"
    VARLEN_UNICODE = "varlen_unicode"
    REFERENCE = "reference"
    OPAQUE = "opaque"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class CompoundField(_Frozen):
    """One member of a compound type."""

    name: str
    offset: int
    type: TypeDescriptor


class TypeDescriptor(_Frozen):
    """Structural description of a dataset element type."""

    kind: TypeKind
    size: int  # bytes per element
    base: TypeDescriptor | None = None  # array, varlen_array and enum
    dims: tuple[int, ...] = ()  # array only
    fields: tuple[CompoundField, ...] = ()  # compound only
    members: dict[str, int] = Field(default_factory=dict)  # enum only

    def __str__(self) -> str:
        bits = self.size * 8
        if self.kind == TypeKind.INTEGER:
            return f"int{bits}"
        if self.kind == TypeKind.UNSIGNED:
            return f"uint{bits}"
        if self.kind == TypeKind.FLOAT:
            return f"float{bits}"
        if self.kind == TypeKind.COMPLEX:
            return f"complex{bits}"
        if self.kind == TypeKind.BOOLEAN:
            return "bool"
        if self.kind == TypeKind.ENUM:
            return f"enum<{self.base}>({', '.join(self.members)})"
        if self.kind == TypeKind.COMPOUND:
            inner = ", ".join(f"{f.name}: {f.type}" for f in self.fields)
            return f"compound{{{inner}}}"
        if self.kind == TypeKind.ARRAY:
            return f"{self.base}[{', '.join(str(d) for d in self.dims)}]"
        if self.kind == TypeKind.VARLEN_ARRAY:
            return f"vlen<{self.base}>"
        if self.kind == TypeKind.FIXED_ASCII:
            return f"ascii[{self.size}]"
        if self.kind == TypeKind.FIXED_UNICODE:
            return f"utf8[{self.size}]"
        if self.kind == TypeKind.VARLEN_ASCII:
            return "vlen ascii"
        if self.kind == TypeKind.VARLEN_UNICODE:
            return "vlen utf8"
        if self.kind == TypeKind.REFERENCE:
            return "reference"
        return f"opaque[{self.size}]"


class FilterInfo(_Frozen):
    """One stage of a chunked dataset's filter pipeline."""

    id: int
    name: str
    cd_values: tuple[int, ...] = ()
    optional: bool = False

    def __str__(self) -> str:
        if self.cd_values:
            return f"{self.name}({', '.join(str(v) for v in self.cd_values)})"
        return self.name


# --- Layouts ---


class CompactLayout(_Frozen):
    kind: Literal["compact"] = "compact"


class ContiguousLayout(_Frozen):
    kind: Literal["contiguous"] = "contiguous"


class ChunkedLayout(_Frozen):
    """Chunked storage with its chunk shape and ordered filter pipeline."""

    kind: Literal["chunked"] = "chunked"
    chunk_shape: tuple[int, ...]
    filters: tuple[FilterInfo, ...] = ()


class VirtualLayout(_Frozen):
    kind: Literal["virtual"] = "virtual"


DatasetLayoutInfo = Annotated[
    Union[CompactLayout, ContiguousLayout, ChunkedLayout, VirtualLayout],
    Field(discriminator="kind"),
]


# --- Entities ---


class GroupInfo(_Frozen):
    """A group and everything below it."""

    kind: Literal["group"] = "group"
    name: str
    identifier: int  # h5py object id, only meaningful while the file was open
    link_kind: LinkKind
    entities: tuple[EntityInfo, ...] = ()
    attrs: dict[str, str] = Field(default_factory=dict)
    cyclic: bool = False  # link leads back to an ancestor; children not repeated


class DatasetInfo(_Frozen):
    """A dataset's shape, element type, storage layout and attributes."""

    kind: Literal["dataset"] = "dataset"
    name: str
    identifier: int
    link_kind: LinkKind
    shape: tuple[int, ...]
    layout_info: DatasetLayoutInfo
    dtype_descr: TypeDescriptor
    attrs: dict[str, str] = Field(default_factory=dict)

    @property
    def rank(self) -> int:
        return len(self.shape)

    @model_validator(mode="after")
    def check_chunk_rank(self) -> DatasetInfo:
        if isinstance(self.layout_info, ChunkedLayout):
            if len(self.layout_info.chunk_shape) != len(self.shape):
                raise ValueError(
                    f"Dataset '{self.name}' chunk rank mismatch: "
                    f"shape {self.shape}, chunks {self.layout_info.chunk_shape}"
                )
        return self


EntityInfo = Annotated[Union[GroupInfo, DatasetInfo], Field(discriminator="kind")]

CompoundField.model_rebuild()
TypeDescriptor.model_rebuild()
GroupInfo.model_rebuild()


class FileInfo(_Frozen):
    """Snapshot of an HDF5 file: its name, size and top-level entities."""

    name: str
    size: int
    entities: tuple[EntityInfo, ...] = ()

    def entity(self, index: list[int] | tuple[int, ...]) -> GroupInfo | DatasetInfo:
        """Return the entity at an index path, see :func:`nexplore.navigate.resolve`."""
        from nexplore.navigate import resolve

        return resolve(self, index)

    def to_view_nodes(self) -> list[Any]:
        """Project the top-level entities to view nodes."""
        from nexplore.view import to_view_node

        return [to_view_node(entity) for entity in self.entities]

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str) -> FileInfo:
        return cls.model_validate_json(data)
