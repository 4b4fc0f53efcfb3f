"""Pytest configuration and fixtures for bintree tests."""

import logging
import os

import pytest

from dataknobs_bintree import config as bt_config
from dataknobs_bintree.node_data import NodeData
from dataknobs_bintree.tree import BinTree


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Run every test with default settings and no environment overrides."""
    for key in list(os.environ):
        if key.startswith(bt_config.ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    bt_config.reset_settings()
    yield
    bt_config.reset_settings()


@pytest.fixture
def word_tree():
    """Tree built from: m e t and not sss."""
    tree = BinTree()
    for word in ["m", "e", "t", "and", "not", "sss"]:
        tree.insert(NodeData(word))
    return tree


@pytest.fixture
def driver_text():
    """Driver input describing five trees, the last one unterminated."""
    return (
        "iii not tttt eee r not and jj r eee pp r sssss eee not tttt ooo ff m m y z $$\n"
        "b a c b a c $$\n"
        "c b a $$\n"
        "1 2 3 4 5 6 7 x y z $$\n"
        "m e t and not sss\n"
    )


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo logger configuration done by CLI invocations."""
    logger = logging.getLogger("dataknobs_bintree")
    level, handlers = logger.level, list(logger.handlers)
    yield
    logger.setLevel(level)
    logger.handlers[:] = handlers
