"""Timeline Nodes: the fixed waypoint catalog sigils can be aligned to.

Invariants:
    - Catalog is read-only; the core never creates or deletes nodes
    - Node ids are unique within a catalog
"""

from sigil_codex.core.codex_types import TimelineNode
from sigil_codex.core.domain_types import ChakraType, NodeId


DEFAULT_TIMELINE_NODES: tuple[TimelineNode, ...] = (
    TimelineNode(
        id=NodeId("past-echo"),
        name="Past Echo",
        description="Integrate wisdom from your journey",
        chakra=ChakraType.ROOT,
        x=150, y=300,
        color="var(--chakra-root)",
    ),
    TimelineNode(
        id=NodeId("present-flow"),
        name="Present Flow",
        description="Embody your current truth",
        chakra=ChakraType.HEART,
        x=400, y=150,
        color="var(--chakra-heart)",
    ),
    TimelineNode(
        id=NodeId("future-vision"),
        name="Future Vision",
        description="Manifest your highest potential",
        chakra=ChakraType.CROWN,
        x=650, y=300,
        color="var(--chakra-crown)",
    ),
)


def find_node(
    node_id: str | None, nodes: tuple[TimelineNode, ...] = DEFAULT_TIMELINE_NODES,
) -> TimelineNode | None:
    """Look up a node by id. None for unknown or missing ids."""
    if not node_id:
        return None
    return next((n for n in nodes if n.id == node_id), None)
