import pytest

from turbometa.torrent.tree import DirNode, FileNode, freeze


def test_freeze_builds_nested_directories():
    tree = freeze({"d": {"e.txt": FileNode(5), "f.txt": FileNode(7)}, "g": FileNode(1)})

    assert tree == DirNode({"d": DirNode({"e.txt": FileNode(5), "f.txt": FileNode(7)}), "g": FileNode(1)})
    assert isinstance(tree["d"], DirNode)
    assert "g" in tree
    assert len(tree) == 2


def test_entries_are_read_only():
    tree = DirNode({"a": FileNode(1)})
    with pytest.raises(TypeError):
        tree.entries["b"] = FileNode(2)


def test_dirnode_does_not_alias_the_source_mapping():
    source = {"a": FileNode(1)}
    tree = DirNode(source)
    source["b"] = FileNode(2)
    assert "b" not in tree


def test_walk_yields_leaves_in_insertion_order():
    tree = freeze({"z": FileNode(1), "d": {"x": {"y": FileNode(2)}, "a": FileNode(3)}})

    assert list(tree.walk()) == [
        (("z",), FileNode(1)),
        (("d", "x", "y"), FileNode(2)),
        (("d", "a"), FileNode(3)),
    ]
    assert tree.total_size() == 6


def test_empty_directory_and_file_sizes():
    assert DirNode().total_size() == 0
    assert list(DirNode().walk()) == []
    assert FileNode(42).total_size() == 42


def test_file_node_is_frozen():
    with pytest.raises(AttributeError):
        FileNode(1).size = 2


def test_deep_tree_does_not_recurse():
    depth = 3000
    leaf = {"f": FileNode(1)}
    nested = leaf
    for _ in range(depth):
        nested = {"d": nested}

    tree = freeze(nested)

    ((path, node),) = list(tree.walk())
    assert path == ("d",) * depth + ("f",)
    assert node == FileNode(1)
    assert tree.total_size() == 1
