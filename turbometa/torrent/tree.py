from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class FileNode:
    """A file of ``size`` bytes."""

    size: int

    def total_size(self) -> int:
        return self.size


@dataclass(frozen=True, slots=True)
class DirNode:
    """A directory: names mapped to files and sub-directories."""

    entries: Mapping[str, "DirTreeNode"] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self):
        if not isinstance(self.entries, MappingProxyType):
            object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __getitem__(self, name: str) -> "DirTreeNode":
        return self.entries[name]

    def __contains__(self, name: str) -> bool:
        return name in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def walk(self) -> Iterator[tuple[tuple[str, ...], FileNode]]:
        # explicit stack, path depth comes from untrusted input
        stack = [((), iter(self.entries.items()))]
        while stack:
            prefix, entries = stack[-1]
            for name, node in entries:
                if isinstance(node, FileNode):
                    yield (*prefix, name), node
                else:
                    stack.append(((*prefix, name), iter(node.entries.items())))
                    break
            else:
                stack.pop()

    def total_size(self) -> int:
        return sum(leaf.size for _, leaf in self.walk())


DirTreeNode = FileNode | DirNode


def freeze(tree: dict) -> DirNode:
    # nested dicts (directories) and FileNodes (files) -> immutable DirNode tree,
    # children frozen before their parent
    frozen: dict[int, DirNode] = {}
    stack = [(tree, False)]
    while stack:
        directory, children_done = stack.pop()
        if children_done:
            frozen[id(directory)] = DirNode(
                {
                    name: node if isinstance(node, FileNode) else frozen.pop(id(node))
                    for name, node in directory.items()
                }
            )
            continue
        stack.append((directory, True))
        stack.extend(
            (node, False) for node in directory.values() if not isinstance(node, FileNode)
        )
    return frozen.pop(id(tree))
