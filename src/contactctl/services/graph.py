"""GraphService — contact/file graph derivation and analysis.

The graph is derived from the current contact set on every call and never
persisted. Layout and drawing belong to the consumer of ``show()``; node
sizes and colors are included so renderers need no extra configuration.
"""

from __future__ import annotations

from typing import Any

import networkx as nx

from contactctl.domain.graph import (
    ContactGraph,
    EdgeKind,
    GraphNode,
    NodeKind,
    derive_graph,
    node_size,
    search_graph,
)
from contactctl.infrastructure.storage import StorageError
from contactctl.services.base import BaseService
from contactctl.services.result import ServiceResult


def to_networkx(graph: ContactGraph) -> nx.Graph[str]:
    """Convert to an undirected NetworkX graph.

    Parallel edges between one pair (several shared files) collapse into
    a single edge whose ``weight`` is the sum of their strengths.
    """
    g: nx.Graph[str] = nx.Graph()
    for node in graph.nodes:
        g.add_node(node.id, kind=str(node.kind), name=node.display_name)
    for edge in graph.edges:
        if g.has_edge(edge.source_id, edge.target_id):
            g[edge.source_id][edge.target_id]["weight"] += edge.strength
        else:
            g.add_edge(edge.source_id, edge.target_id, weight=edge.strength, kind=str(edge.kind))
    return g


class GraphService(BaseService):
    """Handles graph derivation and queries over contacts."""

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    async def _derive(self) -> tuple[ContactGraph, list[str]]:
        contacts, warnings = await self._load_contacts()
        graph = derive_graph(
            contacts or [],
            implied_strength=self._vault.graph_config.implied_strength,
        )
        return graph, warnings

    def _node_dict(self, graph: ContactGraph, node: GraphNode) -> dict[str, Any]:
        config = self._vault.graph_config
        color = config.contact_node_color if node.kind == NodeKind.CONTACT else config.file_node_color
        return {
            **node.model_dump(mode="json"),
            "size": round(node_size(graph, node, base=config.node_size), 4),
            "color": color,
        }

    # ------------------------------------------------------------------
    # show: full node/edge payload
    # ------------------------------------------------------------------

    async def show(self) -> ServiceResult:
        """Derive the graph and return every node and edge."""
        try:
            graph, warnings = await self._derive()
        except StorageError as exc:
            return ServiceResult.failure("graph", "READ_FAILED", str(exc))

        config = self._vault.graph_config
        return ServiceResult(
            ok=True,
            op="graph",
            data={
                "node_count": len(graph.nodes),
                "edge_count": len(graph.edges),
                "nodes": [self._node_dict(graph, node) for node in graph.nodes],
                "edges": [edge.model_dump(mode="json") for edge in graph.edges],
                "layout": {
                    "link_strength": config.link_strength,
                    "repel_force": config.repel_force,
                    "center_force": config.center_force,
                },
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # search: highlight set
    # ------------------------------------------------------------------

    async def search(self, term: str) -> ServiceResult:
        """Find nodes by name and the edges that touch them."""
        try:
            graph, warnings = await self._derive()
        except StorageError as exc:
            return ServiceResult.failure("graph_search", "READ_FAILED", str(exc))

        nodes, edges = search_graph(graph, term)
        return ServiceResult(
            ok=True,
            op="graph_search",
            data={
                "term": term,
                "count": len(nodes),
                "items": [self._node_dict(graph, node) for node in nodes],
                "edges": [edge.model_dump(mode="json") for edge in edges],
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # rank: degree centrality of contacts
    # ------------------------------------------------------------------

    async def rank(self, *, top: int = 20) -> ServiceResult:
        """Rank contacts by degree centrality (files and shared-file peers)."""
        try:
            graph, warnings = await self._derive()
        except StorageError as exc:
            return ServiceResult.failure("rank", "READ_FAILED", str(exc))

        if not graph.nodes:
            return ServiceResult(ok=True, op="rank", data={"count": 0, "items": []}, warnings=warnings)

        g = to_networkx(graph)
        centrality = nx.degree_centrality(g)
        contacts = [node for node in graph.nodes if node.kind == NodeKind.CONTACT]
        ranked = sorted(contacts, key=lambda node: centrality[node.id], reverse=True)[:top]

        items = [
            {
                "id": node.id,
                "name": node.display_name,
                "score": round(centrality[node.id], 4),
                "degree": g.degree(node.id),
            }
            for node in ranked
        ]
        return ServiceResult(
            ok=True,
            op="rank",
            data={"count": len(items), "items": items},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # summary: counts and connectivity
    # ------------------------------------------------------------------

    async def summary(self) -> ServiceResult:
        """Count nodes and edges by kind and the connected components."""
        try:
            graph, warnings = await self._derive()
        except StorageError as exc:
            return ServiceResult.failure("graph_summary", "READ_FAILED", str(exc))

        g = to_networkx(graph)
        contact_count = sum(1 for node in graph.nodes if node.kind == NodeKind.CONTACT)
        return ServiceResult(
            ok=True,
            op="graph_summary",
            data={
                "contacts": contact_count,
                "files": len(graph.nodes) - contact_count,
                "direct_edges": len(graph.edges_of_kind(EdgeKind.DIRECT)),
                "implied_edges": len(graph.edges_of_kind(EdgeKind.IMPLIED)),
                "components": nx.number_connected_components(g) if graph.nodes else 0,
                "isolated_contacts": sum(
                    1
                    for node in graph.nodes
                    if node.kind == NodeKind.CONTACT and g.degree(node.id) == 0
                ),
            },
            warnings=warnings,
        )
