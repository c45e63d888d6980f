"""Project descriptor trees to view nodes for display.

View nodes keep only what a tree widget shows: a label, the kind of node
and the children. Attributes and layout details stay on the descriptors.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rich.markup import escape
from rich.tree import Tree

from nexplore.storage.format import CYCLE_GLYPH, DATASET_GLYPH, GROUP_GLYPH, LINK_GLYPH
from nexplore.utils.schema import DatasetInfo, GroupInfo, LinkKind


@dataclass(frozen=True)
class ViewNode:
    """A labelled node of a display tree."""

    label: str
    is_group: bool
    children: tuple[ViewNode, ...] = field(default_factory=tuple)


def _link_suffix(link_kind: LinkKind) -> str:
    if link_kind == LinkKind.HARD:
        return ""
    return f" {LINK_GLYPH} {link_kind.value.lower()}"


def to_view_node(entity: GroupInfo | DatasetInfo) -> ViewNode:
    """Project a GroupInfo or DatasetInfo to a ViewNode."""
    if isinstance(entity, GroupInfo):
        label = f"{GROUP_GLYPH} {entity.name}{_link_suffix(entity.link_kind)}"
        if entity.cyclic:
            label += f" {CYCLE_GLYPH}"
        return ViewNode(
            label=label,
            is_group=True,
            children=tuple(to_view_node(child) for child in entity.entities),
        )
    if isinstance(entity, DatasetInfo):
        dims = " × ".join(str(n) for n in entity.shape) or "scalar"
        label = (
            f"{DATASET_GLYPH} {entity.name} [{dims}] {entity.dtype_descr}"
            f"{_link_suffix(entity.link_kind)}"
        )
        return ViewNode(label=label, is_group=False)
    raise TypeError(f"Cannot project {type(entity).__name__} to a view node")


def to_rich_tree(
    title: str,
    nodes: list[ViewNode],
    max_depth: int | None = None,
    show_index: bool = True,
) -> Tree:
    """Render view nodes as a rich Tree.

    Args:
        title: Label of the tree's root.
        nodes: Top-level view nodes.
        max_depth: Deepest level to render; None renders everything.
        show_index: Prefix each label with its index path.
    """
    tree = Tree(f"[bold]{escape(title)}[/bold]")

    def add(parent: Tree, node: ViewNode, index: tuple[int, ...]) -> None:
        prefix = f"[dim]{'.'.join(str(i) for i in index)}[/dim] " if show_index else ""
        style = "bold cyan" if node.is_group else ""
        branch = parent.add(f"{prefix}{escape(node.label)}", style=style)
        if max_depth is not None and len(index) >= max_depth:
            return
        for i, child in enumerate(node.children):
            add(branch, child, index + (i,))

    for i, node in enumerate(nodes):
        add(tree, node, (i,))
    return tree
