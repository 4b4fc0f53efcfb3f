import io

from dataknobs_bintree import config as bt_config
from dataknobs_bintree.driver import build_tree, read_tokens, read_trees, run_demo
from dataknobs_bintree.node_data import NodeData
from dataknobs_bintree.tree import BinTree


def test_read_tokens():
    infile = io.StringIO("a  b\n\n c\td \n")
    assert list(read_tokens(infile)) == ["a", "b", "c", "d"]


def test_read_trees(driver_text):
    groups = list(read_trees(io.StringIO(driver_text)))
    assert len(groups) == 5
    assert groups[1] == ["b", "a", "c", "b", "a", "c"]
    assert groups[4] == ["m", "e", "t", "and", "not", "sss"]


def test_read_trees_keeps_empty_terminated_group():
    assert list(read_trees(io.StringIO("$$ a $$"))) == [[], ["a"]]
    assert list(read_trees(io.StringIO(""))) == []


def test_read_trees_custom_sentinel():
    bt_config.set_settings(bt_config.BinTreeSettings(sentinel="##"))
    assert list(read_trees(io.StringIO("a b ## $$ c"))) == [["a", "b"], ["$$", "c"]]
    assert list(read_trees(io.StringIO("a $$ b"), sentinel="$$")) == [["a"], ["b"]]


def test_build_tree_skips_duplicates(driver_text):
    groups = list(read_trees(io.StringIO(driver_text)))
    tree = BinTree()
    echo = io.StringIO()
    assert build_tree(tree, groups[0], echo=echo) == 14
    assert len(tree) == 14
    assert echo.getvalue().split() == groups[0]
    assert str(tree) == "and eee ff iii jj m not ooo pp r sssss tttt y z"
    assert tree.get_depth(NodeData("and")) == 3
    assert tree.get_depth(NodeData("not")) == 2


def test_run_demo(driver_text):
    out = io.StringIO()
    assert run_demo(io.StringIO(driver_text), out) == 5
    report = out.getvalue()
    assert report.startswith("Initial data:\n  iii not tttt")
    assert "Retrieve --> and:  found" in report
    assert "Retrieve --> sss:  not found" in report
    assert "Depth    --> and:  3" in report
    assert "Depth    --> sss:  4" in report
    assert report.count("T == T2?     equal") == 5
    assert report.count("T != first?  equal") == 1
    assert report.count("T != first?  not equal") == 4
    assert report.count("T == dup?    equal") == 1
    assert "Array contents: a b c\n" in report
    assert report.count("-" * 61) == 5


def test_run_demo_custom_probes():
    out = io.StringIO()
    run_demo(io.StringIO("b a c $$"), out, probes=["a", "zz"])
    report = out.getvalue()
    assert "Retrieve --> a:   found" in report
    assert "Retrieve --> zz:  not found" in report
    assert "Depth    --> a:   2" in report
