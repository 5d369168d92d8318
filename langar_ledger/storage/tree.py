"""Mini README: Nested-map access helpers shared by every ledger.

Structure:
    * ensure_path - walk a key path, inserting a default at each missing node.
    * lookup_path - walk a key path without creating anything.
    * unwrap_legacy - accept the ``[ {tree} ]`` layout older files used.

All four ledgers are dictionaries of dictionaries keyed by strings. These
helpers replace the "create the node if it is not there" blocks that would
otherwise be repeated in each mutator.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Sequence


def ensure_path(
    tree: Dict[str, Any],
    keys: Sequence[str],
    leaf_factory: Callable[[], Any] = dict,
) -> Any:
    """Return the node at ``keys``, creating intermediate dicts as needed.

    Intermediate nodes are always dictionaries; the final node is built with
    ``leaf_factory`` when absent. A node of the wrong type (for example a
    number where a month dict is expected) is replaced, because the ledgers
    only ever store dictionaries above the leaf level.
    """

    if not keys:
        return tree
    node = tree
    for key in keys[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    last = keys[-1]
    leaf = node.get(last)
    expected = type(leaf_factory())
    if not isinstance(leaf, expected):
        leaf = leaf_factory()
        node[last] = leaf
    return leaf


def lookup_path(tree: Dict[str, Any], keys: Sequence[str]) -> Optional[Any]:
    """Return the node at ``keys`` or ``None`` if any step is missing."""

    node: Any = tree
    for key in keys:
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    return node


def unwrap_legacy(document: Any) -> Dict[str, Any]:
    """Normalise a loaded document to a plain dictionary tree."""

    if isinstance(document, list):
        document = document[0] if document else {}
    if not isinstance(document, dict):
        return {}
    return document
