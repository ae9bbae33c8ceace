"""SQL Repositories: SQLAlchemy implementations of the core boundary protocols.

Invariants:
    - Every write commits before returning; on failure (SQLAlchemyError or a
      driver-level OSError) the session is rolled back
      and DatabaseError is raised (no partial writes are visible)
    - Every query is scoped by user_id
    - Alignment upsert is keyed by (user_id, sigil_id): repeat calls overwrite
    - Returned Sigils carry timezone-aware created_at

Design Decisions:
    - Alignment and XP writes are dialect INSERT .. ON CONFLICT DO UPDATE, picked
      from the bound engine (postgresql or sqlite), so concurrent first writes
      for one key cannot trip the unique constraint
    - Parameter (de)serialization lives here: core records stay free of JSON shape
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sigil_codex.core.codex_types import NumerologyProfile, Sigil, SigilParameters
from sigil_codex.core.domain_types import (
    ChakraType, EvolutionStage, NodeId, SigilId, UserId,
)
from sigil_codex.core.errors import DatabaseError
from sigil_codex.models.journal_entry import JournalEntry as JournalEntryModel
from sigil_codex.models.sigil import Sigil as SigilModel
from sigil_codex.models.sigil_alignment import SigilAlignment as AlignmentModel
from sigil_codex.models.user_progress import UserProgress as UserProgressModel

logger = logging.getLogger(__name__)


# ─── Serialization ──────────────────────────────────────────────

def _as_utc(moment: datetime | None) -> datetime | None:
    if moment is None or moment.tzinfo is not None:
        return moment
    return moment.replace(tzinfo=timezone.utc)


def parameters_to_json(params: SigilParameters) -> dict:
    numerology = params.numerology
    return {
        "chakra": params.chakra.value,
        "frequency": params.frequency,
        "intention": params.intention,
        "prime_multiplier": params.prime_multiplier,
        "archetype_key": params.archetype_key,
        "numerology_profile": {
            "life_path": numerology.life_path,
            "expression": numerology.expression,
            "soul_urge": numerology.soul_urge,
            "base_form": numerology.base_form,
            "overlay": numerology.overlay,
            "ornamentation": numerology.ornamentation,
        },
        "svg": params.svg,
        "evolution_parent": params.evolution_parent,
        "evolution_stage": (
            params.evolution_stage.value if params.evolution_stage else None
        ),
        "evolution_date": (
            params.evolution_date.isoformat() if params.evolution_date else None
        ),
    }


def parameters_from_json(data: dict) -> SigilParameters:
    numerology = data.get("numerology_profile") or {}
    stage = data.get("evolution_stage")
    evolved_at = data.get("evolution_date")
    return SigilParameters(
        chakra=ChakraType(data["chakra"]),
        frequency=float(data["frequency"]),
        intention=data.get("intention", ""),
        numerology=NumerologyProfile(
            life_path=numerology.get("life_path", 0),
            expression=numerology.get("expression", 0),
            soul_urge=numerology.get("soul_urge", 0),
            base_form=numerology.get("base_form", ""),
            overlay=numerology.get("overlay", ""),
            ornamentation=numerology.get("ornamentation", ""),
        ),
        prime_multiplier=data.get("prime_multiplier", 1),
        archetype_key=data.get("archetype_key"),
        svg=data.get("svg", ""),
        evolution_parent=data.get("evolution_parent"),
        evolution_stage=EvolutionStage(stage) if stage else None,
        evolution_date=(
            _as_utc(datetime.fromisoformat(evolved_at)) if evolved_at else None
        ),
    )


def sigil_from_row(row: SigilModel) -> Sigil:
    return Sigil(
        id=SigilId(row.id),
        user_id=UserId(row.user_id),
        parameters=parameters_from_json(row.parameters),
        created_at=_as_utc(row.created_at),
    )


# ─── Repositories ───────────────────────────────────────────────

# Driver-level failures (connection refused, reset) reach us as OSError,
# not wrapped in SQLAlchemyError
_DB_ERRORS = (SQLAlchemyError, OSError)

_DIALECT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _upsert_statement(db: AsyncSession, model):
    """INSERT .. ON CONFLICT builder for the session's dialect."""
    dialect = db.get_bind().dialect.name
    build = _DIALECT_INSERTS.get(dialect)
    if build is None:
        raise DatabaseError(f"No upsert support for dialect {dialect}", "upsert")
    return build(model)


class SqlSigilRepository:
    """SigilRepository over the `sigils` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert(self, user_id: UserId, params: SigilParameters) -> Sigil:
        row = SigilModel(
            user_id=user_id,
            parameters=parameters_to_json(params),
            created_at=datetime.now(timezone.utc),
        )
        try:
            self.db.add(row)
            await self.db.commit()
            await self.db.refresh(row)
        except _DB_ERRORS as e:
            await self.db.rollback()
            logger.error(f"Sigil insert failed: {e}", extra={"user_id": user_id})
            raise DatabaseError("Could not store sigil", "insert")
        return sigil_from_row(row)

    async def list_by_owner(self, user_id: UserId) -> list[Sigil]:
        """All of the owner's sigils, newest first."""
        try:
            result = await self.db.execute(
                select(SigilModel)
                .where(SigilModel.user_id == user_id)
                .order_by(SigilModel.created_at.desc()),
            )
        except _DB_ERRORS as e:
            logger.error(f"Sigil query failed: {e}", extra={"user_id": user_id})
            raise DatabaseError("Could not list sigils", "query")
        return [sigil_from_row(row) for row in result.scalars().all()]


class SqlAlignmentRepository:
    """AlignmentRepository over `sigil_alignments`, unique on (user_id, sigil_id)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def upsert(
        self, user_id: UserId, sigil_id: SigilId, node_id: NodeId,
    ) -> None:
        """Single-statement upsert: concurrent calls never collide, last write wins."""
        now = datetime.now(timezone.utc)
        try:
            stmt = _upsert_statement(self.db, AlignmentModel).values(
                id=str(uuid.uuid4()),
                user_id=user_id, sigil_id=sigil_id,
                timeline_node_id=node_id, alignment_date=now,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["user_id", "sigil_id"],
                set_={"timeline_node_id": node_id, "alignment_date": now},
            )
            await self.db.execute(stmt)
            await self.db.commit()
        except _DB_ERRORS as e:
            await self.db.rollback()
            logger.error(
                f"Alignment upsert failed: {e}",
                extra={"user_id": user_id, "sigil_id": sigil_id, "node_id": node_id},
            )
            raise DatabaseError("Could not store alignment", "upsert")

    async def list_by_owner(
        self, user_id: UserId,
    ) -> list[tuple[SigilId, NodeId]]:
        try:
            result = await self.db.execute(
                select(AlignmentModel.sigil_id, AlignmentModel.timeline_node_id)
                .where(AlignmentModel.user_id == user_id),
            )
        except _DB_ERRORS as e:
            logger.error(
                f"Alignment query failed: {e}", extra={"user_id": user_id},
            )
            raise DatabaseError("Could not list alignments", "query")
        return [
            (SigilId(sigil_id), NodeId(node_id))
            for sigil_id, node_id in result.all()
        ]


class SqlJournalRepository:
    """JournalRepository over `journal_entries`. Append only."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def append(self, entry: dict) -> None:
        try:
            self.db.add(JournalEntryModel(**entry))
            await self.db.commit()
        except _DB_ERRORS as e:
            await self.db.rollback()
            logger.error(
                f"Journal append failed: {e}",
                extra={
                    "user_id": entry.get("user_id"),
                    "entry_type": entry.get("entry_type"),
                },
            )
            raise DatabaseError("Could not append journal entry", "insert")


class SqlXPAwarder:
    """XPAwarder that accumulates light points in `user_progress`."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_xp(self, user_id: UserId, amount: int) -> None:
        now = datetime.now(timezone.utc)
        try:
            stmt = _upsert_statement(self.db, UserProgressModel).values(
                user_id=user_id, light_points=amount, updated_at=now,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["user_id"],
                set_={
                    "light_points": UserProgressModel.light_points + amount,
                    "updated_at": now,
                },
            )
            await self.db.execute(stmt)
            await self.db.commit()
        except _DB_ERRORS as e:
            await self.db.rollback()
            logger.error(f"XP award failed: {e}", extra={"user_id": user_id})
            raise DatabaseError("Could not award XP", "update")
