"""CRUD and category management over stored user commands.

Every public method opens its own short session and returns detached
``UserCommand`` models, so callers never hold ORM state.
"""

import logging
from typing import Any, Iterable, Optional

from sqlalchemy import Engine, delete, func, or_, select, update
from sqlalchemy.orm import Session, sessionmaker

from quickcmd.commands.types import UserCommand
from quickcmd.config.schema import CommandDefinition
from quickcmd.db.models import UserCommandRecord, utcnow
from quickcmd.db.session import make_session_factory

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("label", "command", "description", "category", "icon")
EXPORT_FIELDS = EDITABLE_FIELDS


class CommandStoreError(Exception):
    """Base class for command store failures."""


class CommandNotFoundError(CommandStoreError):
    def __init__(self, command_id: int) -> None:
        super().__init__(f"Command {command_id} not found")
        self.command_id = command_id


class CategoryNotFoundError(CommandStoreError):
    def __init__(self, category: str) -> None:
        super().__init__(f"Category {category!r} not found")
        self.category = category


class CommandStore:
    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory: sessionmaker = make_session_factory(engine)

    def _session(self) -> Session:
        return self._session_factory()

    # ------------------------------------------------------------------
    # Single commands
    # ------------------------------------------------------------------

    def add_command(
        self,
        label: str,
        command: str,
        category: str,
        description: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> UserCommand:
        record = UserCommandRecord(
            label=label,
            command=command,
            category=category,
            description=description,
            icon=icon,
        )
        with self._session() as session:
            session.add(record)
            session.commit()
            logger.info("Added command %d (%s) to %s", record.id, label, category)
            return UserCommand.model_validate(record)

    def get_command(self, command_id: int) -> UserCommand:
        with self._session() as session:
            record = session.get(UserCommandRecord, command_id)
            if record is None:
                raise CommandNotFoundError(command_id)
            return UserCommand.model_validate(record)

    def update_command(self, command_id: int, **changes: Any) -> UserCommand:
        """Apply the given editable fields; unknown keys raise ValueError."""
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        with self._session() as session:
            record = session.get(UserCommandRecord, command_id)
            if record is None:
                raise CommandNotFoundError(command_id)
            for field_name, value in changes.items():
                setattr(record, field_name, value)
            record.updated_at = utcnow()
            session.commit()
            return UserCommand.model_validate(record)

    def delete_command(self, command_id: int) -> None:
        with self._session() as session:
            record = session.get(UserCommandRecord, command_id)
            if record is None:
                raise CommandNotFoundError(command_id)
            session.delete(record)
            session.commit()
        logger.info("Deleted command %d", command_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_all_commands(self) -> list[UserCommand]:
        stmt = select(UserCommandRecord).order_by(UserCommandRecord.category, UserCommandRecord.label)
        return self._fetch(stmt)

    def get_commands_by_category(self, category: str) -> list[UserCommand]:
        stmt = (
            select(UserCommandRecord)
            .where(UserCommandRecord.category == category)
            .order_by(UserCommandRecord.label)
        )
        return self._fetch(stmt)

    def get_available_categories(self) -> list[str]:
        stmt = select(UserCommandRecord.category).distinct().order_by(UserCommandRecord.category)
        with self._session() as session:
            return list(session.scalars(stmt))

    def search_commands(self, query: str) -> list[UserCommand]:
        """Case-insensitive substring match over label, command, description and category."""
        needle = query.strip().lower()
        if not needle:
            return self.get_all_commands()

        columns = (
            UserCommandRecord.label,
            UserCommandRecord.command,
            UserCommandRecord.description,
            UserCommandRecord.category,
        )
        stmt = (
            select(UserCommandRecord)
            .where(or_(*(func.lower(col).contains(needle, autoescape=True) for col in columns)))
            .order_by(UserCommandRecord.category, UserCommandRecord.label)
        )
        return self._fetch(stmt)

    def get_category_command_count(self, category: str) -> int:
        stmt = select(func.count()).select_from(UserCommandRecord).where(UserCommandRecord.category == category)
        with self._session() as session:
            return session.scalar(stmt) or 0

    def count(self) -> int:
        with self._session() as session:
            return session.scalar(select(func.count()).select_from(UserCommandRecord)) or 0

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def rename_category(self, old_name: str, new_name: str) -> int:
        """Move every command in ``old_name`` to ``new_name``. Returns the row count."""
        stmt = (
            update(UserCommandRecord)
            .where(UserCommandRecord.category == old_name)
            .values(category=new_name, updated_at=utcnow())
        )
        with self._session() as session:
            changed = session.execute(stmt).rowcount
            if not changed:
                session.rollback()
                raise CategoryNotFoundError(old_name)
            session.commit()
        logger.info("Renamed category %s -> %s (%d commands)", old_name, new_name, changed)
        return changed

    def delete_category(self, category: str) -> int:
        stmt = delete(UserCommandRecord).where(UserCommandRecord.category == category)
        with self._session() as session:
            removed = session.execute(stmt).rowcount
            if not removed:
                session.rollback()
                raise CategoryNotFoundError(category)
            session.commit()
        logger.info("Deleted category %s (%d commands)", category, removed)
        return removed

    # ------------------------------------------------------------------
    # Bulk
    # ------------------------------------------------------------------

    def export_commands(self) -> list[dict]:
        return [
            {name: getattr(cmd, name) for name in EXPORT_FIELDS}
            for cmd in self.get_all_commands()
        ]

    def import_commands(self, items: Iterable[dict], replace: bool = False) -> int:
        """Import exported commands.

        With ``replace`` the store is cleared first. Otherwise entries equal
        to an existing command (label, command and category) are skipped.
        Returns the number of commands added.
        """
        entries = [
            {name: item.get(name) for name in EXPORT_FIELDS}
            for item in items
        ]
        for entry in entries:
            if not entry["label"] or not entry["command"] or not entry["category"]:
                raise ValueError("Imported commands need label, command and category")

        with self._session() as session:
            if replace:
                session.execute(delete(UserCommandRecord))
                existing: set[tuple] = set()
            else:
                existing = {
                    tuple(row)
                    for row in session.execute(
                        select(UserCommandRecord.label, UserCommandRecord.command, UserCommandRecord.category)
                    ).all()
                }

            added = 0
            for entry in entries:
                key = (entry["label"], entry["command"], entry["category"])
                if key in existing:
                    continue
                session.add(UserCommandRecord(**entry))
                existing.add(key)
                added += 1
            session.commit()

        logger.info("Imported %d commands (replace=%s)", added, replace)
        return added

    def seed_defaults(self, definitions: Iterable[CommandDefinition]) -> int:
        """Populate an empty store from catalogue definitions."""
        if self.count() > 0:
            return 0
        return self.import_commands(
            d.model_dump(include=set(EXPORT_FIELDS)) for d in definitions
        )

    def clear(self) -> int:
        with self._session() as session:
            removed = session.execute(delete(UserCommandRecord)).rowcount
            session.commit()
        return removed

    def _fetch(self, stmt) -> list[UserCommand]:
        with self._session() as session:
            return [UserCommand.model_validate(r) for r in session.scalars(stmt)]
