"""Journal Entries: event log payload builders."""

from datetime import datetime, timezone

from sigil_codex.core.codex_types import Sigil, SigilParameters
from sigil_codex.core.domain_types import ChakraType
from sigil_codex.core.journal_entries import (
    alignment_entry, creation_entry, evolution_entry,
)
from sigil_codex.core.timeline_nodes import find_node

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _sigil(sigil_id="s-1", intention="Open my heart") -> Sigil:
    return Sigil(
        id=sigil_id, user_id="u-1",
        parameters=SigilParameters(
            chakra=ChakraType.SOLAR_PLEXUS, frequency=528.0, intention=intention,
        ),
        created_at=NOW,
    )


def test_creation_entry():
    entry = creation_entry(_sigil(), 25, NOW)
    assert entry["entry_type"] == "sigil_creation"
    assert entry["title"] == "Sigil: Open my heart"
    assert entry["chakra"] == "SolarPlexus"
    assert entry["tags"] == ["sigil", "solarplexus"]
    assert entry["xp_awarded"] == 25
    assert entry["frequency"] == 528.0
    assert entry["user_id"] == "u-1"
    assert entry["created_at"] == NOW


def test_evolution_entry_mentions_both_intentions():
    parent = _sigil("p", "Open my heart")
    child = _sigil("c", "Share my heart")
    entry = evolution_entry(parent, child, 40, NOW)
    assert entry["entry_type"] == "sigil_evolution"
    assert "Open my heart" in entry["content"]
    assert "Share my heart" in entry["content"]
    assert "evolution" in entry["tags"]


def test_alignment_entry_uses_node_chakra():
    node = find_node("future-vision")
    entry = alignment_entry(_sigil(), node, 15, NOW)
    assert entry["entry_type"] == "sigil_alignment"
    assert entry["title"] == "Timeline Alignment: Future Vision"
    assert entry["chakra"] == "Crown"
    assert entry["tags"] == ["sigil", "timeline", "future-vision"]
    assert entry["frequency"] is None
