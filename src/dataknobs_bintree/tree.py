"""Binary search tree of NodeData payloads.

This module provides BinTree, an unbalanced binary search tree that owns its
nodes and the payloads stored in them. Duplicate payloads are rejected on
insert and individual keys cannot be removed.

The tree supports:
- Insertion, ordered lookup and depth queries
- Structural equality and node-reusing copy assignment
- Moving payloads out to a SequenceBuffer in sorted order, and building a
  balanced tree back from such a buffer
- Text, sideways and Graphviz renderings

Copying a tree onto another overwrites the receiver's existing nodes in place
wherever the shapes overlap, so copying between similarly shaped trees
allocates few or no nodes. TreeStats records the allocations.

Typical usage example:

    ```python
    from dataknobs_bintree import BinTree, NodeData, SequenceBuffer

    tree = BinTree()
    for word in ["m", "e", "t", "and", "not", "sss"]:
        tree.insert(NodeData(word))

    print(tree)                       # and e m not sss t
    print(tree.get_depth(NodeData("sss")))  # 4

    buf = SequenceBuffer()
    tree.to_sorted_sequence(buf)      # tree is now empty
    tree.from_sorted_sequence(buf)    # balanced tree, buffer emptied
    ```

Note:
    Structural operations recurse once per tree level. Inserting already
    sorted input produces a tree as tall as it has elements, so very long
    sorted runs can exceed the interpreter's recursion limit when copied,
    compared or depth-searched. Convert through a SequenceBuffer to balance.
"""

from __future__ import annotations

import json
import logging
import re
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Iterator, List, TextIO, Tuple, Union

import graphviz
from pyparsing import ParseBaseException, nested_expr

from .config import get_settings
from .exceptions import BufferCapacityError, TreeFormatError
from .node_data import NodeData
from .sequence import SequenceBuffer

logger = logging.getLogger(__name__)

EMPTY_LINK = "-"

# Payloads matching this, or equal to EMPTY_LINK, are written quoted
_NEEDS_QUOTES = re.compile(r"[\s()\"'\\]")


@dataclass
class TreeStats:
    """Node allocation counters for a single tree.

    Attributes:
        nodes_allocated: Nodes created over the tree's lifetime.
        nodes_released: Nodes released over the tree's lifetime.
    """

    nodes_allocated: int = 0
    nodes_released: int = 0

    @property
    def live_nodes(self) -> int:
        """Nodes currently held by the tree."""
        return self.nodes_allocated - self.nodes_released


class _Node:
    __slots__ = ("data", "left", "right")

    def __init__(self, data: NodeData | None = None) -> None:
        self.data = data
        self.left: _Node | None = None
        self.right: _Node | None = None


def _as_node_data(value: Any) -> NodeData:
    return value if isinstance(value, NodeData) else NodeData(value)


class BinTree:
    """An unbalanced binary search tree owning its nodes and payloads.

    Payloads handed to insert() are copied; payloads moved in by
    from_sorted_sequence() are taken over as-is. Equality is structural:
    two trees are equal when they have the same shape and equal payloads at
    every position.

    Attributes:
        stats: Allocation counters for this tree's nodes.

    Example:
        ```python
        t1 = BinTree()
        for word in ["b", "a", "c"]:
            t1.insert(NodeData(word))

        t2 = BinTree(t1)        # deep copy
        assert t1 == t2

        t3 = BinTree()
        for word in ["a", "b", "c"]:
            t3.insert(NodeData(word))
        assert t1 != t3         # same values, different shape
        ```
    """

    def __init__(self, source: BinTree | None = None) -> None:
        """Initialize a tree, optionally as a deep copy of another.

        Args:
            source: Tree to copy. If None, the tree starts empty.
        """
        self._root: _Node | None = None
        self.stats = TreeStats()
        if source is not None:
            self.assign(source)

    def __repr__(self) -> str:
        return f"BinTree({self.as_string()!r})"

    def __str__(self) -> str:
        """In-order payloads separated by spaces, or the empty-tree notice."""
        if self.is_empty():
            return get_settings().empty_tree_notice
        return " ".join(str(nd) for nd in self.inorder())

    def __len__(self) -> int:
        return sum(1 for _ in self.inorder())

    def __iter__(self) -> Iterator[NodeData]:
        return self.inorder()

    def __contains__(self, target: Any) -> bool:
        return self.retrieve(target)[0]

    def __copy__(self) -> BinTree:
        return BinTree(self)

    def __deepcopy__(self, memo: dict) -> BinTree:
        return BinTree(self)

    # Structurally compared and mutable
    __hash__ = None  # type: ignore[assignment]

    def __eq__(self, other: object) -> bool:
        """Check structural equality with another tree."""
        if not isinstance(other, BinTree):
            return NotImplemented
        if other is self:
            return True
        return self._check_equal(self._root, other._root)

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def _check_equal(self, node: _Node | None, other: _Node | None) -> bool:
        if node is None and other is None:
            return True
        if node is None or other is None:
            return False
        return (
            node.data == other.data
            and self._check_equal(node.left, other.left)
            and self._check_equal(node.right, other.right)
        )

    def _new_node(self, data: NodeData | None = None) -> _Node:
        self.stats.nodes_allocated += 1
        return _Node(data)

    def is_empty(self) -> bool:
        """Check whether the tree holds no nodes."""
        return self._root is None

    def make_empty(self, keep_payloads: bool = False) -> int:
        """Release every node of the tree.

        Nodes are released children first. Unless keep_payloads is set, each
        node drops its payload before the node itself is released.

        Args:
            keep_payloads: If True, payloads are detached untouched because the
                caller has already taken references to them.

        Returns:
            The number of nodes released.
        """
        released = self._pluck(self._root, keep_payloads)
        self._root = None
        if released:
            logger.debug("Released %d nodes (keep_payloads=%s)", released, keep_payloads)
        return released

    def _pluck(self, node: _Node | None, keep_payloads: bool = False) -> int:
        """Release a subtree in post-order and return the node count."""
        if node is None:
            return 0
        released = 0
        stack: List[Tuple[_Node, bool]] = [(node, False)]
        while stack:
            current, expanded = stack.pop()
            if not expanded:
                stack.append((current, True))
                if current.right is not None:
                    stack.append((current.right, False))
                if current.left is not None:
                    stack.append((current.left, False))
                continue
            if not keep_payloads:
                current.data = None
            current.left = current.right = None
            released += 1
        self.stats.nodes_released += released
        return released

    def insert(self, payload: Any) -> bool:
        """Insert a copy of payload at its ordered position.

        Args:
            payload: A NodeData (or a raw value to wrap in one).

        Returns:
            True if inserted. False if an equal payload is already present or
            payload is None; the tree is then unchanged and the caller keeps
            ownership of payload.
        """
        if payload is None:
            return False
        nd = _as_node_data(payload)
        if self._root is None:
            self._root = self._new_node(nd.copy())
            return True

        node = self._root
        while True:
            if nd == node.data:
                return False
            if nd < node.data:
                if node.left is None:
                    node.left = self._new_node(nd.copy())
                    return True
                node = node.left
            else:
                if node.right is None:
                    node.right = self._new_node(nd.copy())
                    return True
                node = node.right

    def retrieve(self, target: Any) -> Tuple[bool, NodeData | None]:
        """Find the stored payload equal to target by ordered search.

        The search follows BST ordering and does not fall back to a full scan,
        so it requires the tree to satisfy the BST invariant.

        Args:
            target: A NodeData (or raw value) to look for.

        Returns:
            (True, stored payload) when found, otherwise (False, None).
        """
        if target is None:
            return False, None
        nd = _as_node_data(target)
        node = self._root
        while node is not None:
            if nd == node.data:
                return True, node.data
            node = node.left if nd < node.data else node.right
        return False, None

    def get_depth(self, target: Any) -> int:
        """Level of the node holding target: 1 for the root, 0 if absent.

        All nodes are searched, left subtree before right, so the answer does
        not depend on the tree obeying BST ordering.
        """
        if target is None:
            return 0
        return self._get_depth(self._root, _as_node_data(target))

    def _get_depth(self, node: _Node | None, target: NodeData) -> int:
        if node is None:
            return 0
        if target == node.data:
            return 1
        depth = self._get_depth(node.left, target)
        if depth > 0:
            return depth + 1
        depth = self._get_depth(node.right, target)
        if depth > 0:
            return depth + 1
        return 0

    def height(self) -> int:
        """Number of levels in the tree (0 when empty)."""
        return self._height(self._root)

    def _height(self, node: _Node | None) -> int:
        if node is None:
            return 0
        return 1 + max(self._height(node.left), self._height(node.right))

    def assign(self, other: BinTree) -> BinTree:
        """Make this tree a deep copy of other, reusing existing nodes.

        Where both trees have a node at the same position, the payload is
        overwritten in place. Missing positions get new nodes and positions
        absent from other are released. Assigning a tree to itself does
        nothing.

        Returns:
            This tree, to allow chaining.
        """
        if other is self:
            return self
        before = self.stats.nodes_allocated
        self._root = self._copy_subtree(self._root, other._root)
        logger.debug(
            "Assigned tree: %d nodes allocated", self.stats.nodes_allocated - before
        )
        return self

    def _copy_subtree(self, lhs: _Node | None, rhs: _Node | None) -> _Node | None:
        if rhs is None:
            # nothing to copy, drop extra nodes
            self._pluck(lhs)
            return None
        if lhs is None:
            # needs a node here, allocate one
            lhs = self._new_node(rhs.data.copy())
        else:
            # existing node, overwrite its payload
            lhs.data.assign(rhs.data)
        lhs.left = self._copy_subtree(lhs.left, rhs.left)
        lhs.right = self._copy_subtree(lhs.right, rhs.right)
        return lhs

    def inorder(self) -> Iterator[NodeData]:
        """Iterate over stored payloads left, self, right."""
        stack: List[_Node] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            if node.data is not None:
                yield node.data
            node = node.right

    def to_sorted_sequence(self, buffer: SequenceBuffer) -> int:
        """Move every payload into buffer in ascending order.

        Payloads are written to consecutive slots after the buffer's occupied
        run. The payload objects now belong to the buffer and the tree is left
        empty.

        Args:
            buffer: Destination slot array.

        Returns:
            The number of payloads moved.

        Raises:
            BufferCapacityError: If buffer lacks room for every payload. The
                tree and buffer are left unchanged.
        """
        count = len(self)
        free = buffer.free()
        if free is not None and free < count:
            raise BufferCapacityError(
                "Buffer too small for tree",
                context={"required": count, "free": free, "capacity": buffer.capacity},
            )
        for nd in self.inorder():
            buffer.append(nd)
        self.make_empty(keep_payloads=True)
        logger.debug("Moved %d payloads to buffer", count)
        return count

    def from_sorted_sequence(self, buffer: SequenceBuffer) -> int:
        """Build a balanced tree from the sorted payloads held in buffer.

        The occupied run is split at its midpoint recursively, taking the
        lower midpoint for even-sized ranges, so a node with one child always
        has it on the right. This tree's existing nodes are reused where the
        shape allows, extra nodes are released and missing ones allocated.
        Every consumed slot is cleared.

        Args:
            buffer: Source slots; payloads must occupy slots 0..n-1 in
                ascending order.

        Returns:
            The number of payloads moved into the tree.

        Raises:
            SequenceLayoutError: If the buffer has a gap in its occupied run.
                The tree is left unchanged.
        """
        count = buffer.occupied_run()
        if count == 0:
            logger.warning("Buffer is empty, nothing to convert; tree emptied")
            self.make_empty()
            return 0
        before = self.stats.nodes_allocated
        self._root = self._build_balanced(self._root, buffer, 0, count - 1)
        logger.debug(
            "Built balanced tree of %d payloads, %d nodes allocated",
            count,
            self.stats.nodes_allocated - before,
        )
        return count

    def _build_balanced(
        self, node: _Node | None, buffer: SequenceBuffer, lo: int, hi: int
    ) -> _Node | None:
        if lo > hi:
            # no elements left for this position, drop existing nodes
            self._pluck(node)
            return None
        mid = lo + (hi - lo) // 2
        if node is None:
            node = self._new_node()
        node.data = buffer.take(mid)
        node.left = self._build_balanced(node.left, buffer, lo, mid - 1)
        node.right = self._build_balanced(node.right, buffer, mid + 1, hi)
        return node

    def display(self, out: TextIO) -> None:
        """Write the in-order payloads (or the empty-tree notice) and a newline."""
        out.write(str(self) + "\n")

    def display_sideways(self, out: TextIO) -> None:
        """Write the tree rotated 90 degrees counterclockwise.

        The root is leftmost, the right subtree is printed above each node
        and the left subtree below it, one node per line, indented by
        depth.
        """
        settings = get_settings()
        if self.is_empty():
            out.write(settings.empty_display_notice + "\n")
            return
        self._sideways(self._root, 1, out, " " * settings.indent_width)

    def _sideways(self, node: _Node | None, level: int, out: TextIO, indent: str) -> None:
        if node is None:
            return
        self._sideways(node.right, level + 1, out, indent)
        out.write(f"{indent * level}{node.data}\n")
        self._sideways(node.left, level + 1, out, indent)

    def as_string(self) -> str:
        """Parenthesized form of the tree.

        A leaf is written as its payload; any other node as
        ``(data left right)`` with ``-`` for an empty link. The empty tree
        is the empty string. A payload that is ``-``, empty, or holds
        whitespace, parentheses, quotes or backslashes is written as a
        double-quoted string with JSON escapes.

        Example:
            ```python
            tree = build_bintree_from_string("(m (e and -) t)")
            tree.as_string()  # '(m (e and -) t)'
            tree.insert(NodeData("a b"))
            tree.as_string()  # '(m (e (and "a b" -) -) t)'
            ```
        """
        return self._as_string(self._root) if self._root is not None else ""

    def _as_string(self, node: _Node | None) -> str:
        if node is None:
            return EMPTY_LINK
        data = _quote_payload(str(node.data))
        if node.left is None and node.right is None:
            return data
        return f"({data} {self._as_string(node.left)} {self._as_string(node.right)})"

    def build_dot(self, **kwargs: Any) -> graphviz.graphs.Digraph:
        """Build a Graphviz Digraph of this tree.

        Edges are labeled ``L`` or ``R`` by the side of the child.

        Args:
            **kwargs: Passed to the graphviz.Digraph constructor (e.g., name,
                format, node_attr).

        Returns:
            A graphviz.Digraph, empty for an empty tree.

        Note:
            Rendering requires the Graphviz system installation; building the
            DOT source does not.
        """
        dot = graphviz.Digraph(**kwargs)
        if self._root is None:
            return dot
        ids = {id(self._root): 0}
        queue: Deque[_Node] = deque([self._root])
        while queue:
            node = queue.popleft()
            idx = ids[id(node)]
            dot.node(f"N_{idx:03}", str(node.data))
            for label, child in (("L", node.left), ("R", node.right)):
                if child is not None:
                    ids[id(child)] = len(ids)
                    queue.append(child)
                    dot.edge(f"N_{idx:03}", f"N_{ids[id(child)]:03}", label=label)
        return dot


def build_bintree_from_string(from_string: str) -> BinTree:
    """Build a BinTree from its parenthesized string form.

    The format is the one produced by BinTree.as_string(): a bare token is a
    leaf, ``(data left right)`` a node with children, and ``-`` an empty link.
    A trailing empty right link may be omitted. A double-quoted token is a
    payload with JSON escapes, so ``"-"`` is a payload rather than an empty
    link. Payloads are strings, and the BST ordering is not checked, so
    arbitrary binary trees can be built.

    Args:
        from_string: The tree text, e.g. "(m (e and -) (t not -))".

    Returns:
        The reconstructed tree.

    Raises:
        TreeFormatError: If the text is not a single well-formed tree.

    Example:
        ```python
        tree = build_bintree_from_string("(b - (a c))")
        tree.get_depth(NodeData("c"))  # 3, even though the tree is not a BST
        ```
    """
    tree = BinTree()
    text = from_string.strip()
    if not text:
        return tree
    if text.startswith("("):
        data = _parse_nested(text, from_string)
    else:
        # A bare leaf; parse it wrapped so quoted tokens are honored
        items = _parse_nested(f"({text})", from_string)
        if len(items) != 1 or not isinstance(items[0], str):
            raise TreeFormatError(
                "Expected a single token or a parenthesized tree",
                context={"text": from_string},
            )
        data = items[0]
    tree._root = _build_nodes_from_list(tree, data, from_string)
    return tree


def _quote_payload(text: str) -> str:
    if text == EMPTY_LINK or not text or _NEEDS_QUOTES.search(text):
        return json.dumps(text, ensure_ascii=False)
    return text


def _unquote_payload(token: str, source: str) -> str:
    if not token.startswith(('"', "'")):
        return token
    try:
        value = json.loads(token)
    except ValueError as e:
        raise TreeFormatError(
            f"Malformed quoted payload {token}", context={"text": source, "token": token}
        ) from e
    return value


def _parse_nested(text: str, source: str) -> List[Any]:
    try:
        data = nested_expr().parse_string(text, parse_all=True)
    except ParseBaseException as e:
        raise TreeFormatError(f"Malformed tree string: {e}", context={"text": source}) from e
    return data.as_list()[0]


def _build_nodes_from_list(
    tree: BinTree, data: Union[str, List[Any]], source: str
) -> _Node | None:
    if isinstance(data, str):
        if data == EMPTY_LINK:
            return None
        return tree._new_node(NodeData(_unquote_payload(data, source)))
    if not data or len(data) > 3 or not isinstance(data[0], str) or data[0] == EMPTY_LINK:
        raise TreeFormatError(
            "Each node must be written as (data [left [right]])",
            context={"text": source, "node": data},
        )
    node = tree._new_node(NodeData(_unquote_payload(data[0], source)))
    if len(data) > 1:
        node.left = _build_nodes_from_list(tree, data[1], source)
    if len(data) > 2:
        node.right = _build_nodes_from_list(tree, data[2], source)
    return node
