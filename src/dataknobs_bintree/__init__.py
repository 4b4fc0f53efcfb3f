"""Binary search tree container for ordered, comparable payloads.

The dataknobs-bintree package provides a teaching-grade binary search tree
whose nodes own comparable payloads, together with a slot buffer used to move
those payloads out of and back into a tree.

## Modules

### NodeData - Comparable payload
Wraps a single totally ordered value (a string in the demo driver) and
supplies the comparison operators the tree relies on.

### BinTree - Binary search tree
- Insertion with duplicate rejection, ordered lookup, depth queries
- Structural equality and node-reusing copy assignment
- In-order move to a SequenceBuffer and balanced rebuild from one
- Text, sideways and Graphviz renderings

### SequenceBuffer - Payload slot array
A fixed-capacity array of payload slots with explicit overflow errors.

## Quick Examples

```python
from dataknobs_bintree import BinTree, NodeData, SequenceBuffer

tree = BinTree()
for word in ["m", "e", "t", "and", "not", "sss"]:
    tree.insert(NodeData(word))

print(tree)                              # and e m not sss t
found, payload = tree.retrieve(NodeData("not"))
print(tree.get_depth(NodeData("sss")))   # 4

buf = SequenceBuffer()
tree.to_sorted_sequence(buf)             # tree empty, buf full
tree.from_sorted_sequence(buf)           # balanced tree, buf empty
```

## Installation

```bash
pip install dataknobs-bintree
```
"""

from dataknobs_bintree.config import BinTreeSettings, get_settings, load_settings
from dataknobs_bintree.exceptions import (
    BinTreeError,
    BufferCapacityError,
    ConfigNotFoundError,
    ConfigurationError,
    SequenceLayoutError,
    TreeFormatError,
)
from dataknobs_bintree.node_data import NodeData
from dataknobs_bintree.sequence import SequenceBuffer
from dataknobs_bintree.tree import BinTree, TreeStats, build_bintree_from_string

__version__ = "1.0.0"

__all__ = [
    "BinTree",
    "BinTreeError",
    "BinTreeSettings",
    "BufferCapacityError",
    "ConfigNotFoundError",
    "ConfigurationError",
    "NodeData",
    "SequenceBuffer",
    "SequenceLayoutError",
    "TreeFormatError",
    "TreeStats",
    "build_bintree_from_string",
    "get_settings",
    "load_settings",
]
