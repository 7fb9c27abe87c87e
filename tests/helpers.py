"""Node builders shared by the unit tests."""

import stat

from lstree.core.node import Metadata, TreeNode


def file_node(name, size=0, mtime=0.0, ctime=0.0, index=0, depth=1):
    node = TreeNode(f"/t/{name}", depth=depth, index=index)
    node.metadata = Metadata(name=name, size=size, mode=stat.S_IFREG | 0o644,
                             mtime=mtime, ctime=ctime)
    return node


def dir_node(name, children=(), mtime=0.0, index=0, depth=1):
    node = TreeNode(f"/t/{name}", depth=depth, index=index)
    node.metadata = Metadata(name=name, size=4096, mode=stat.S_IFDIR | 0o755,
                             mtime=mtime, ctime=mtime)
    node.children = list(children)
    return node
