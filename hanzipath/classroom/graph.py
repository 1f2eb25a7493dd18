"""
GraphAccessor - Read-only view of the component graph in a StaticCorpus.

Every list handed out is a fresh copy, so callers can sort or extend what
they get back without touching the shared corpus.
"""

import logging
from typing import Optional

import networkx as nx

from hanzipath.data import StaticCorpus
from hanzipath.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class GraphAccessor:
    """Component/compound lookups and frequencies over a StaticCorpus."""

    def __init__(self, corpus: StaticCorpus):
        """
        Args:
            corpus: Sealed corpus to read from

        Raises:
            InvalidArgumentError: If corpus is None
        """
        if corpus is None:
            raise InvalidArgumentError("StaticCorpus cannot be None")
        self.corpus = corpus

    def compounds_containing(self, component_id: int) -> Optional[list[int]]:
        """Compounds that list component_id, or None if it is no one's component."""
        compounds = self.corpus.compounds_containing(component_id)
        if compounds is None:
            return None
        return list(compounds)

    def components_of(self, compound_id: int) -> Optional[list[int]]:
        """Components of compound_id, or None if it has no decomposition."""
        components = self.corpus.components_of(compound_id)
        if components is None:
            return None
        return list(components)

    def frequency(self, unit_id: int) -> int:
        return self.corpus.frequency(unit_id)

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    def to_networkx(self) -> nx.DiGraph:
        """Component graph as a DiGraph with edges component -> compound."""
        graph = nx.DiGraph()
        for compound_id, components in self.corpus.compound_to_components.items():
            for component_id in components:
                graph.add_edge(component_id, compound_id)
        return graph

    def decomposition_cycles(self) -> dict[str, list]:
        """
        Report self-referential and mutually dependent decompositions.

        These are not rejected anywhere; the report is informational.

        Returns:
            Dict with:
            - self_references: unit ids listed as their own component
            - cycles: groups of unit ids (size > 1) that reach each other
        """
        graph = self.to_networkx()
        self_references = sorted(u for u, _ in nx.selfloop_edges(graph))
        cycles = sorted(
            sorted(group)
            for group in nx.strongly_connected_components(graph)
            if len(group) > 1
        )
        if self_references or cycles:
            logger.debug(
                f"Decomposition graph has {len(self_references)} self-references "
                f"and {len(cycles)} cyclic groups"
            )
        return {"self_references": self_references, "cycles": cycles}
