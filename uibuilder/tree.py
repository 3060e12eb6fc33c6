"""Arena-backed element tree store.

Nodes live in a flat table keyed by id; parent links and ordered child-id
lists are kept beside it, so a mutation only touches the affected record.
Records in the arena never own their ``children`` list; use
:meth:`ElementTree.children_of` or :meth:`ElementTree.snapshot`.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, fields
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from .errors import UIParseError
from .logging_utils import apply_debug_logging
from .model import ENUM_FIELDS, ElementType, Node, create_node
from .parser import parse_ui_source

logger = logging.getLogger(__name__)

_MUTABLE_FIELDS = {f.name for f in fields(Node)} - {"id", "children"}


@dataclass
class ImportResult:
    success: bool
    error: Optional[str] = None
    imported_count: int = 0


class ElementTree:
    def __init__(self, nodes: Optional[Iterable[Node]] = None):
        self._nodes: Dict[str, Node] = {}
        self._parent: Dict[str, Optional[str]] = {}
        self._children: Dict[Optional[str], List[str]] = {None: []}
        self._next_id = 1
        if nodes is not None:
            self.replace(nodes)

    @classmethod
    def from_nodes(cls, nodes: Iterable[Node]) -> "ElementTree":
        return cls(nodes)

    # -- queries -----------------------------------------------------------

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    @property
    def roots(self) -> List[Node]:
        return [self._nodes[node_id] for node_id in self._children[None]]

    def get(self, node_id: str) -> Node:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise KeyError(f"unknown element id {node_id!r}") from None

    def find(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def parent_of(self, node_id: str) -> Optional[Node]:
        self.get(node_id)
        parent_id = self._parent[node_id]
        return None if parent_id is None else self._nodes[parent_id]

    def parent_id_of(self, node_id: str) -> Optional[str]:
        self.get(node_id)
        return self._parent[node_id]

    def children_of(self, node_id: Optional[str]) -> List[Node]:
        if node_id is not None:
            self.get(node_id)
        return [self._nodes[child] for child in self._children[node_id]]

    def location(self, node_id: str) -> Tuple[Optional[str], int, int]:
        """Return ``(parent_id, index, sibling_count)`` for ``node_id``."""

        parent_id = self.parent_id_of(node_id)
        siblings = self._children[parent_id]
        return parent_id, siblings.index(node_id), len(siblings)

    def walk(self) -> Iterator[Tuple[Node, Optional[str]]]:
        """Yield ``(node, parent_id)`` depth-first, parents before children."""

        stack: List[str] = list(reversed(self._children[None]))
        while stack:
            node_id = stack.pop()
            yield self._nodes[node_id], self._parent[node_id]
            stack.extend(reversed(self._children[node_id]))

    def snapshot(self) -> List[Node]:
        """Return deep copies of the roots with their ``children`` filled in."""

        return [self._build_subtree(node_id) for node_id in self._children[None]]

    def _build_subtree(self, node_id: str) -> Node:
        node = copy.deepcopy(self._nodes[node_id])
        node.children = [self._build_subtree(child) for child in self._children[node_id]]
        return node

    def _materialize(self, nodes: Iterable[Node]) -> List[Node]:
        # live arena records carry no children; rebuild their subtrees first
        return [
            self._build_subtree(node.id) if self._nodes.get(node.id) is node else node
            for node in nodes
        ]

    # -- mutation ----------------------------------------------------------

    def _generate_id(self) -> str:
        while True:
            candidate = f"element_{self._next_id}"
            self._next_id += 1
            if candidate not in self._nodes:
                return candidate

    def _attach(self, node: Node, parent_id: Optional[str]) -> None:
        self._nodes[node.id] = node
        self._parent[node.id] = parent_id
        self._children[node.id] = []
        self._children[parent_id].append(node.id)

    def _adopt(self, node: Node, parent_id: Optional[str], keep_ids: bool) -> Node:
        record = copy.deepcopy(node)
        children = record.children
        record.children = []
        if not keep_ids or not record.id or record.id in self._nodes:
            record.id = self._generate_id()
        self._attach(record, parent_id)
        for child in children:
            self._adopt(child, record.id, keep_ids)
        return record

    def add(
        self,
        element_type: Union[ElementType, str],
        name: Optional[str] = None,
        parent_id: Optional[str] = None,
    ) -> Node:
        if parent_id is not None:
            self.get(parent_id)
        node = create_node(element_type, name, node_id=self._generate_id())
        self._attach(node, parent_id)
        return node

    def insert(self, node: Node, parent_id: Optional[str] = None) -> Node:
        """Adopt ``node`` and its subtree under ``parent_id`` with fresh ids."""

        if parent_id is not None:
            self.get(parent_id)
        (node,) = self._materialize([node])
        return self._adopt(node, parent_id, keep_ids=False)

    def update(self, node_id: str, **changes) -> Node:
        node = self.get(node_id)
        unknown = set(changes) - _MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"cannot update field(s) {sorted(unknown)} on {node_id!r}")
        if "type" in changes:
            changes["type"] = ElementType.coerce(changes["type"])
        for name, table in ENUM_FIELDS.items():
            if name in changes and changes[name] not in table:
                raise ValueError(f"{name} must be a {table.name} ordinal, got {changes[name]!r}")
        for name, value in changes.items():
            setattr(node, name, copy.deepcopy(value))
        return node

    def remove(self, node_id: str) -> None:
        """Detach ``node_id`` from its parent and drop its whole subtree."""

        parent_id = self.parent_id_of(node_id)
        self._children[parent_id].remove(node_id)
        stack = [node_id]
        while stack:
            current = stack.pop()
            stack.extend(self._children.pop(current))
            del self._nodes[current]
            del self._parent[current]

    def move(self, node_id: str, direction: str) -> bool:
        if direction not in ("up", "down"):
            raise ValueError(f"direction must be 'up' or 'down', got {direction!r}")
        parent_id, index, count = self.location(node_id)
        new_index = index - 1 if direction == "up" else index + 1
        if not 0 <= new_index < count:
            return False
        siblings = self._children[parent_id]
        siblings.insert(new_index, siblings.pop(index))
        return True

    def clear(self) -> None:
        self._nodes.clear()
        self._parent.clear()
        self._children = {None: []}
        self._next_id = 1

    def replace(self, nodes: Iterable[Node]) -> None:
        """Swap the whole tree for ``nodes``; ids are kept unless blank or duplicated."""

        nodes = self._materialize(nodes)
        self.clear()
        for node in nodes:
            self._adopt(node, None, keep_ids=True)

    def append(self, nodes: Iterable[Node]) -> List[Node]:
        """Add ``nodes`` as new roots; every appended node gets a fresh id."""

        return [self._adopt(node, None, keep_ids=False) for node in self._materialize(nodes)]

    def import_source(
        self,
        text: str,
        mode: str = "replace",
        strings: Optional[Mapping[str, str]] = None,
    ) -> ImportResult:
        """Parse ``ParseUI`` source and adopt it; the tree is untouched on failure."""

        if mode not in ("replace", "append"):
            raise ValueError(f"mode must be 'replace' or 'append', got {mode!r}")
        try:
            nodes = parse_ui_source(text, strings=strings)
        except UIParseError as err:
            logger.warning("Import failed (%s): %s", err.kind, err.message.splitlines()[0])
            return ImportResult(success=False, error=err.message)
        if mode == "replace":
            self.replace(nodes)
        else:
            self.append(nodes)
        logger.info("Imported %d root element(s) (%s)", len(nodes), mode)
        return ImportResult(success=True, imported_count=len(nodes))


apply_debug_logging(globals(), logger=logger)
