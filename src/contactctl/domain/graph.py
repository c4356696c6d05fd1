"""Contact graph derivation.

Turns a contact list into nodes and edges for an external renderer:

- one *contact node* per contact (``contact-{id}``)
- one *file node* per distinct link target (``file-{name}``)
- a *direct edge* from each contact to each file it links
- an *implied edge* between every pair of contacts that link the same
  file, one per pair per shared file

Derivation is pure and deterministic. List order follows contact order,
then link order within each contact.
"""

from __future__ import annotations

import math
from enum import StrEnum
from itertools import combinations
from typing import Any

from pydantic import BaseModel, Field

from contactctl.domain.contacts import Contact

DIRECT_STRENGTH = 1.0
IMPLIED_STRENGTH = 0.5


class NodeKind(StrEnum):
    CONTACT = "contact"
    FILE = "file"


class EdgeKind(StrEnum):
    DIRECT = "direct"
    IMPLIED = "implied"


def contact_node_id(contact_id: str) -> str:
    return f"contact-{contact_id}"


def file_node_id(name: str) -> str:
    return f"file-{name}"


class GraphNode(BaseModel):
    """A contact or a linked file."""

    model_config = {"frozen": True}

    id: str
    display_name: str
    kind: NodeKind
    payload: dict[str, Any] = Field(default_factory=dict)


class GraphEdge(BaseModel):
    """An edge between two node ids."""

    model_config = {"frozen": True}

    source_id: str
    target_id: str
    kind: EdgeKind
    strength: float

    def touches(self, node_id: str) -> bool:
        return node_id in (self.source_id, self.target_id)


class ContactGraph(BaseModel):
    """Nodes and edges of one derivation run."""

    model_config = {"frozen": True}

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)

    def node(self, node_id: str) -> GraphNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def edges_of_kind(self, kind: EdgeKind) -> list[GraphEdge]:
        return [edge for edge in self.edges if edge.kind == kind]

    def out_degree(self, node_id: str) -> int:
        """Number of edges whose source is *node_id*."""
        return sum(1 for edge in self.edges if edge.source_id == node_id)


def derive_graph(
    contacts: list[Contact],
    *,
    implied_strength: float = IMPLIED_STRENGTH,
) -> ContactGraph:
    """Build the contact/file graph for *contacts*."""
    nodes: dict[str, GraphNode] = {}
    edges: list[GraphEdge] = []

    for contact in contacts:
        source_id = contact_node_id(contact.id)
        nodes.setdefault(
            source_id,
            GraphNode(
                id=source_id,
                display_name=contact.name,
                kind=NodeKind.CONTACT,
                payload=contact.model_dump(mode="json"),
            ),
        )
        for name in contact.links:
            target_id = file_node_id(name)
            nodes.setdefault(
                target_id,
                GraphNode(
                    id=target_id,
                    display_name=name,
                    kind=NodeKind.FILE,
                    payload={"file_name": name},
                ),
            )
            edges.append(
                GraphEdge(
                    source_id=source_id,
                    target_id=target_id,
                    kind=EdgeKind.DIRECT,
                    strength=DIRECT_STRENGTH,
                )
            )

    # Contacts per file, in encounter order, each contact once.
    sharers: dict[str, dict[str, None]] = {}
    for edge in edges:
        sharers.setdefault(edge.target_id, {})[edge.source_id] = None

    implied: list[GraphEdge] = []
    for members in sharers.values():
        for left, right in combinations(members, 2):
            implied.append(
                GraphEdge(
                    source_id=left,
                    target_id=right,
                    kind=EdgeKind.IMPLIED,
                    strength=implied_strength,
                )
            )

    return ContactGraph(nodes=list(nodes.values()), edges=edges + implied)


def node_size(graph: ContactGraph, node: GraphNode, *, base: float) -> float:
    """Display radius: contacts grow with the number of edges they start."""
    if node.kind == NodeKind.CONTACT:
        return base + math.sqrt(graph.out_degree(node.id) * 2)
    return base


def search_graph(graph: ContactGraph, term: str) -> tuple[list[GraphNode], list[GraphEdge]]:
    """Return nodes whose display name contains *term* and the edges touching them.

    Matching is case-insensitive. An empty term matches nothing.
    """
    needle = term.strip().lower()
    if not needle:
        return [], []
    matched = [node for node in graph.nodes if needle in node.display_name.lower()]
    ids = {node.id for node in matched}
    touching = [
        edge for edge in graph.edges if edge.source_id in ids or edge.target_id in ids
    ]
    return matched, touching
