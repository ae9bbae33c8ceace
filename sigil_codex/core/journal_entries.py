"""Journal Entries: pure builders for the event log written after each mutation.

Invariants:
    - Builders return plain dicts matching JournalRepository.append's contract
    - entry_type is always a JournalEntryType value
    - Tags are lower-case
"""

from datetime import datetime

from sigil_codex.core.codex_types import Sigil, TimelineNode
from sigil_codex.core.domain_types import JournalEntryType, UserId


def _entry(
    user_id: UserId, entry_type: JournalEntryType, title: str, content: str,
    chakra: str, tags: list[str], xp_awarded: int, at: datetime,
    frequency: float | None = None,
) -> dict:
    return {
        "user_id": user_id,
        "entry_type": entry_type.value,
        "title": title,
        "content": content,
        "chakra": chakra,
        "tags": [t.lower() for t in tags],
        "xp_awarded": xp_awarded,
        "frequency": frequency,
        "created_at": at,
    }


def creation_entry(sigil: Sigil, xp_awarded: int, at: datetime) -> dict:
    return _entry(
        sigil.user_id, JournalEntryType.SIGIL_CREATION,
        f"Sigil: {sigil.intention}",
        f"Created a new sigil with the intention: {sigil.intention}",
        sigil.chakra.value, ["sigil", sigil.chakra.value],
        xp_awarded, at, sigil.frequency,
    )


def evolution_entry(
    parent: Sigil, child: Sigil, xp_awarded: int, at: datetime,
) -> dict:
    return _entry(
        child.user_id, JournalEntryType.SIGIL_EVOLUTION,
        f"Sigil Evolution: {child.intention}",
        f'Evolved sigil from "{parent.intention}" to "{child.intention}"',
        child.chakra.value, ["sigil", "evolution", child.chakra.value],
        xp_awarded, at, child.frequency,
    )


def alignment_entry(
    sigil: Sigil, node: TimelineNode, xp_awarded: int, at: datetime,
) -> dict:
    return _entry(
        sigil.user_id, JournalEntryType.SIGIL_ALIGNMENT,
        f"Timeline Alignment: {node.name}",
        f'Aligned sigil "{sigil.intention}" to the {node.name} timeline node',
        node.chakra.value, ["sigil", "timeline", node.id],
        xp_awarded, at,
    )
