"""Widget tree linkage and navigation."""

import logging
import weakref
from typing import Iterator, List, Optional, Tuple, TypeVar, Union

from wiretree.core.exceptions import WidgetTreeError

log = logging.getLogger(__name__)

N = TypeVar("N", bound="TreeNode")


class TreeNode:
    """Ordered child list plus a weak (non-owning) parent reference.

    A node owns its children; the parent link is only used for navigation and
    never keeps a parent alive.
    """

    id: str

    def _init_tree(self) -> None:
        self._parent_ref: Optional["weakref.ref[TreeNode]"] = None
        self._children: List["TreeNode"] = []

    @property
    def parent(self: N) -> Optional[N]:
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def children(self: N) -> Tuple[N, ...]:
        return tuple(self._children)  # type: ignore[arg-type]

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def root(self: N) -> N:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def path(self) -> List[str]:
        """Ids from the root down to this node."""
        ids = []
        node: Optional[TreeNode] = self
        while node is not None:
            ids.append(node.id)
            node = node.parent
        return list(reversed(ids))

    def ancestors(self: N) -> Iterator[N]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def walk(self: N) -> Iterator[N]:
        """Depth-first, pre-order traversal including self."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))  # type: ignore[arg-type]

    def find_widget(self: N, widget_id: object) -> Optional[N]:
        """Return the node named ``widget_id`` as long as it is below self or self itself."""
        wanted = str(widget_id)
        for node in self.walk():
            if str(node.id) == wanted:
                return node
        return None

    def add_child(self: N, child: N) -> N:
        if child.parent is not None:
            raise WidgetTreeError(
                f"Widget '{child.id}' already belongs to '{child.parent.id}'"
            )
        if child is self or any(node is child for node in self.ancestors()):
            raise WidgetTreeError(
                f"Adding '{child.id}' to '{self.id}' would create a cycle"
            )
        if any(kid.id == child.id for kid in self._children):
            raise WidgetTreeError(
                f"Widget '{self.id}' already has a child named '{child.id}'"
            )

        root = self.root
        for node in child.walk():
            if root.find_widget(node.id) is not None:
                log.warning("Duplicate widget id '%s' in tree '%s'", node.id, root.id)

        child._parent_ref = weakref.ref(self)
        self._children.append(child)
        return child

    def remove_child(self: N, child: Union[N, str]) -> N:
        if isinstance(child, TreeNode):
            node = child if child in self._children else None
        else:
            node = next((kid for kid in self._children if kid.id == str(child)), None)
        if node is None:
            raise WidgetTreeError(f"'{child}' is not a child of '{self.id}'")

        self._children.remove(node)
        node._parent_ref = None
        return node  # type: ignore[return-value]

    def __lshift__(self: N, child: N) -> N:
        """``parent << child`` adds ``child`` and returns the parent for chaining."""
        self.add_child(child)
        return self
