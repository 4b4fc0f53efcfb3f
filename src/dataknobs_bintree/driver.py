"""Build trees from token streams and run the demonstration scenario.

Driver input is whitespace-delimited text. Each token becomes one NodeData
and a tree ends at the sentinel token (``$$`` by default) or at end of input:

    iii not tttt eee r not and jj r eee pp r sssss eee not tttt ooo ff m m y z $$
    b a c b a c $$
"""

import logging
from typing import Iterable, Iterator, List, Sequence, TextIO

from .config import get_settings
from .node_data import NodeData
from .sequence import SequenceBuffer
from .tree import BinTree

logger = logging.getLogger(__name__)

DEFAULT_PROBES = ("and", "not", "sss")


def read_tokens(infile: TextIO) -> Iterator[str]:
    """Yield whitespace-delimited tokens from a line-oriented text source."""
    for line in infile:
        yield from line.split()


def read_trees(infile: TextIO, sentinel: str | None = None) -> Iterator[List[str]]:
    """Group the tokens of infile into one list per tree.

    A group ends at the sentinel token (not included) or at end of input. A
    trailing empty group at end of input is not yielded.
    """
    if sentinel is None:
        sentinel = get_settings().sentinel
    group: List[str] = []
    for token in read_tokens(infile):
        if token == sentinel:
            yield group
            group = []
        else:
            group.append(token)
    if group:
        yield group


def build_tree(tree: BinTree, tokens: Iterable[str], echo: TextIO | None = None) -> int:
    """Insert a NodeData for each token into tree.

    Duplicate tokens are rejected by the tree and dropped.

    Args:
        tree: Destination tree.
        tokens: Tokens of a single tree, without the sentinel.
        echo: Optional sink receiving each token followed by a space.

    Returns:
        The number of tokens inserted.
    """
    inserted = 0
    for token in tokens:
        if echo is not None:
            echo.write(token + " ")
        if tree.insert(NodeData(token)):
            inserted += 1
        else:
            logger.debug("Duplicate token %r not inserted", token)
    return inserted


def _write_tree(tree: BinTree, out: TextIO) -> None:
    out.write("Tree contents:\n")
    tree.display(out)
    tree.display_sideways(out)


def _write_buffer(buffer: SequenceBuffer, out: TextIO) -> None:
    out.write("Array contents: " + " ".join(str(nd) for nd in buffer) + "\n")


def run_demo(
    infile: TextIO,
    out: TextIO,
    probes: Sequence[str] = DEFAULT_PROBES,
    capacity: int | None = None,
) -> int:
    """Exercise every tree operation on each tree described by infile.

    For each tree: display it, retrieve and depth-query the probe words,
    compare it with copies, move it into a buffer and build it back.

    Args:
        infile: Driver input text.
        out: Sink for the report.
        probes: Words to retrieve and depth-query.
        capacity: Buffer capacity; defaults to the configured value.

    Returns:
        The number of trees processed.
    """
    settings = get_settings()
    buffer = SequenceBuffer(settings.buffer_capacity if capacity is None else capacity)
    probe_data = [NodeData(word) for word in probes]
    width = max((len(word) for word in probes), default=0)

    tree, copy_tree, first, dup = BinTree(), BinTree(), BinTree(), BinTree()
    processed = 0
    for tokens in read_trees(infile, settings.sentinel):
        out.write("Initial data:\n  ")
        build_tree(tree, tokens, echo=out)
        out.write("\n")
        if processed == 0:
            first.assign(tree)
            dup.assign(dup.assign(tree))

        out.write("Tree Inorder:\n")
        tree.display(out)
        tree.display_sideways(out)

        for nd in probe_data:
            found, _ = tree.retrieve(nd)
            out.write(
                f"Retrieve --> {str(nd) + ':':<{width + 1}}  "
                f"{'found' if found else 'not found'}\n"
            )
        for nd in probe_data:
            out.write(f"Depth    --> {str(nd) + ':':<{width + 1}}  {tree.get_depth(nd)}\n")

        copy_tree.assign(tree)
        out.write(f"T == T2?     {'equal' if tree == copy_tree else 'not equal'}\n")
        out.write(f"T != first?  {'not equal' if tree != first else 'equal'}\n")
        out.write(f"T == dup?    {'equal' if tree == dup else 'not equal'}\n")
        dup.assign(tree)

        tree.to_sorted_sequence(buffer)
        out.write("Tree ==> Array.\nArray should be full, Tree should be empty:\n")
        _write_buffer(buffer, out)
        _write_tree(tree, out)

        tree.from_sorted_sequence(buffer)
        out.write("Array ==> Tree.\nArray should be empty, Tree should be full:\n")
        _write_buffer(buffer, out)
        _write_tree(tree, out)

        tree.make_empty()
        buffer.clear()
        out.write("-" * 61 + "\n")
        processed += 1

    logger.info("Processed %d trees", processed)
    return processed
