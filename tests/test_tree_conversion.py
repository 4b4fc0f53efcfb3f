import logging
import math

import pytest

from dataknobs_bintree.exceptions import BufferCapacityError, SequenceLayoutError
from dataknobs_bintree.node_data import NodeData
from dataknobs_bintree.sequence import SequenceBuffer
from dataknobs_bintree.tree import BinTree


def test_to_sorted_sequence(word_tree):
    _, stored = word_tree.retrieve(NodeData("not"))
    buf = SequenceBuffer()
    assert word_tree.to_sorted_sequence(buf) == 6
    assert word_tree.is_empty()
    assert word_tree.stats.live_nodes == 0
    assert buf.values() == ["and", "e", "m", "not", "sss", "t"]
    # payload objects move, they are not copied
    assert buf[3] is stored


def test_to_sorted_sequence_empty_tree():
    buf = SequenceBuffer()
    assert BinTree().to_sorted_sequence(buf) == 0
    assert len(buf) == 0


def test_to_sorted_sequence_appends_after_occupied_run(word_tree):
    buf = SequenceBuffer.from_values(["0"], capacity=10)
    word_tree.to_sorted_sequence(buf)
    assert buf.values() == ["0", "and", "e", "m", "not", "sss", "t"]


def test_to_sorted_sequence_overflow_leaves_everything_unchanged(word_tree):
    before = word_tree.as_string()
    buf = SequenceBuffer.from_values(["x"], capacity=6)
    with pytest.raises(BufferCapacityError) as excinfo:
        word_tree.to_sorted_sequence(buf)
    assert excinfo.value.context["required"] == 6
    assert excinfo.value.context["free"] == 5
    assert word_tree.as_string() == before
    assert buf.values() == ["x"]


def test_from_sorted_sequence(word_tree):
    buf = SequenceBuffer()
    word_tree.to_sorted_sequence(buf)
    assert word_tree.from_sorted_sequence(buf) == 6
    assert len(buf) == 0
    assert buf.count() == 0
    assert str(word_tree) == "and e m not sss t"
    assert word_tree.as_string() == "(m (and - e) (sss not t))"
    assert word_tree.height() == 3
    assert word_tree.stats.live_nodes == 6


def test_round_trip_preserves_inorder():
    tree = BinTree()
    for word in "iii not tttt eee r and jj pp sssss ooo ff m y z".split():
        tree.insert(NodeData(word))
    before = str(tree)
    buf = SequenceBuffer()
    tree.to_sorted_sequence(buf)
    tree.from_sorted_sequence(buf)
    assert str(tree) == before
    assert tree.retrieve(NodeData("pp"))[0]


def test_from_sorted_sequence_moves_payloads():
    buf = SequenceBuffer.from_values(["a", "b", "c"])
    payloads = list(buf)
    tree = BinTree()
    tree.from_sorted_sequence(buf)
    assert list(tree.inorder()) == payloads
    assert all(a is b for a, b in zip(tree.inorder(), payloads))


@pytest.mark.parametrize("count", [1, 2, 3, 4, 5, 6, 7, 8, 15, 16, 31, 100])
def test_balanced_height(count):
    buf = SequenceBuffer.from_values([f"{idx:03}" for idx in range(count)])
    tree = BinTree()
    tree.from_sorted_sequence(buf)
    assert len(tree) == count
    assert tree.height() == math.ceil(math.log2(count + 1))
    assert [nd.value for nd in tree] == [f"{idx:03}" for idx in range(count)]


def test_single_children_are_on_the_right():
    buf = SequenceBuffer.from_values(["a", "b"])
    tree = BinTree()
    tree.from_sorted_sequence(buf)
    assert tree.as_string() == "(a - b)"

    buf = SequenceBuffer.from_values(["a", "b", "c", "d"])
    tree.from_sorted_sequence(buf)
    assert tree.as_string() == "(b a (c - d))"

    buf = SequenceBuffer.from_values([str(idx) for idx in range(10)])
    tree.from_sorted_sequence(buf)
    assert "-)" not in tree.as_string()


def test_from_sorted_sequence_reuses_nodes_of_same_shape():
    tree = BinTree()
    tree.from_sorted_sequence(SequenceBuffer.from_values("abcdefg"))
    assert tree.stats.nodes_allocated == 7
    tree.from_sorted_sequence(SequenceBuffer.from_values("hijklmn"))
    assert tree.stats.nodes_allocated == 7
    assert tree.stats.nodes_released == 0
    assert str(tree) == "h i j k l m n"


def test_from_sorted_sequence_prunes_and_grows():
    tree = BinTree()
    for word in ["m", "e", "t", "and", "not", "sss", "x", "y", "z"]:
        tree.insert(NodeData(word))
    assert tree.stats.nodes_allocated == 9
    tree.from_sorted_sequence(SequenceBuffer.from_values(["a", "b", "c", "d"]))
    assert tree.as_string() == "(b a (c - d))"
    assert tree.stats.live_nodes == len(tree) == 4

    tree.from_sorted_sequence(SequenceBuffer.from_values("abcdefghijklmno"))
    assert tree.height() == 4
    assert tree.stats.live_nodes == len(tree) == 15


def test_from_sorted_sequence_rejects_gaps(word_tree):
    before = word_tree.as_string()
    buf = SequenceBuffer(capacity=5)
    buf[0] = NodeData("a")
    buf[2] = NodeData("c")
    with pytest.raises(SequenceLayoutError):
        word_tree.from_sorted_sequence(buf)
    assert word_tree.as_string() == before
    assert buf.count() == 2


def test_from_empty_sequence_empties_tree(word_tree, caplog):
    with caplog.at_level(logging.WARNING, logger="dataknobs_bintree"):
        assert word_tree.from_sorted_sequence(SequenceBuffer()) == 0
    assert word_tree.is_empty()
    assert "Buffer is empty" in caplog.text


def test_state_transitions():
    tree = BinTree()
    assert tree.is_empty()
    tree.from_sorted_sequence(SequenceBuffer.from_values(["k"]))
    assert not tree.is_empty()
    buf = SequenceBuffer()
    tree.to_sorted_sequence(buf)
    assert tree.is_empty()
    assert buf.values() == ["k"]
