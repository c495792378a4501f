"""In-memory state graph with Graphviz DOT serialisation."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import graphviz

from common.logging import get_logger
from common.paths import ensure_dir, resolve_output_path

LOGGER = get_logger(__name__)

LABEL_SEPARATOR = ",\n"


@dataclass
class Edge:
    source: str
    target: str
    labels: List[str] = field(default_factory=list)

    @property
    def label(self) -> str:
        return LABEL_SEPARATOR.join(self.labels)


class StateGraph:
    """Named graph of states that may nest other graphs as clusters.

    Node and cluster identifiers use the graph's ``scope``: its name, or the
    name plus a position suffix when a sibling subgraph already uses it.
    """

    def __init__(self, name: str = "", parent: Optional["StateGraph"] = None) -> None:
        self.name = name
        self.scope = name
        self.parent = parent
        self.subgraphs: List[StateGraph] = []
        self._nodes: List[str] = []
        self._edges: Dict[Tuple[str, str], Edge] = {}

    @property
    def nodes(self) -> List[str]:
        return list(self._nodes)

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges.values())

    def node_id(self, state: str) -> str:
        return f"{self.scope}.{state}"

    def add_node(self, state: str) -> str:
        if state not in self._nodes:
            self._nodes.append(state)
        return self.node_id(state)

    def add_edge(self, source: str, target: str, label: str) -> Edge:
        """Add ``source -> target``; parallel edges share one label list."""

        self.add_node(source)
        self.add_node(target)
        edge = self._edges.setdefault((source, target), Edge(source, target))
        if label not in edge.labels:
            edge.labels.append(label)
        return edge

    def add_sub_graph(self, graph: "StateGraph") -> "StateGraph":
        taken = {sub.scope for sub in self.subgraphs}
        graph.scope = graph.name
        position = len(self.subgraphs) + 1
        while graph.scope in taken:
            graph.scope = f"{graph.name}_{position}"
            position += 1
        if graph.scope != graph.name:
            LOGGER.warning(
                "Subgraph name %r already used in %r; drawing it as %r", graph.name, self.name, graph.scope
            )
        graph.parent = self
        self.subgraphs.append(graph)
        return graph

    def to_digraph(self) -> graphviz.Digraph:
        if self.parent is None:
            dot = graphviz.Digraph(
                name=self.name or None,
                graph_attr={"fontsize": "24", "fontname": "Helvetica"},
                node_attr={"fontsize": "12", "fontname": "Helvetica"},
                edge_attr={"fontsize": "9", "fontcolor": "blue", "fontname": "Arial"},
            )
        else:
            dot = graphviz.Digraph(name=f"cluster_{self.scope}")
        if self.name:
            dot.attr(label=self.name)
        for subgraph in self.subgraphs:
            dot.subgraph(subgraph.to_digraph())
        for state in self._nodes:
            dot.node(self.node_id(state), label=state)
        for edge in self._edges.values():
            dot.edge(self.node_id(edge.source), self.node_id(edge.target), label=edge.label)
        return dot

    @property
    def source(self) -> str:
        return self.to_digraph().source

    def save(self, path: str | os.PathLike[str]) -> Path:
        """Write the DOT description to ``path`` and return the written file."""

        target = resolve_output_path(path)
        ensure_dir(target.parent)
        written = Path(self.to_digraph().save(filename=str(target)))
        LOGGER.info("Graph %r saved to %s", self.name, written)
        return written

    def __repr__(self) -> str:
        return (
            f"StateGraph(name={self.name!r}, nodes={len(self._nodes)}, "
            f"edges={len(self._edges)}, subgraphs={len(self.subgraphs)})"
        )
