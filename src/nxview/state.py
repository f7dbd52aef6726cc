"""Persistence of user-driven expand/collapse state, keyed by view item id."""

from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine, select

from nxview.models import BaseViewItem, CollapsibleState, TreeItemState, utcnow


class CollapsibleStateStore:
    """SQLModel-backed store of expand/collapse state."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: str) -> "CollapsibleStateStore":
        """Create a store for a database URL, e.g. ``sqlite:///nxview.db``."""
        return cls(create_engine(database_url, echo=False))

    def init_db(self) -> None:
        """Create the state table if needed."""
        SQLModel.metadata.create_all(self.engine, tables=[TreeItemState.__table__])

    def get_session(self) -> Session:
        return Session(self.engine)

    def get(self, item_id: str) -> Optional[CollapsibleState]:
        """Persisted state for an item, or None if the user never toggled it."""
        with self.get_session() as session:
            row = session.get(TreeItemState, item_id)
            return row.state if row else None

    def set(self, item_id: str, state: CollapsibleState) -> None:
        """Remember that the user expanded or collapsed an item."""
        if state == CollapsibleState.NONE:
            raise ValueError("Only collapsed or expanded state can be stored")
        with self.get_session() as session:
            row = session.get(TreeItemState, item_id)
            if row is None:
                row = TreeItemState(item_id=item_id, state=state)
            else:
                row.state = state
                row.updated_at = utcnow()
            session.add(row)
            session.commit()

    def resolve(self, item: BaseViewItem) -> CollapsibleState:
        """State to render an item with.

        Leaves stay leaves; otherwise the persisted state wins over the
        item's default hint.
        """
        if item.collapsible == CollapsibleState.NONE:
            return CollapsibleState.NONE
        return self.get(item.id) or item.collapsible

    def all(self) -> dict[str, CollapsibleState]:
        with self.get_session() as session:
            rows = session.exec(select(TreeItemState).order_by(TreeItemState.item_id)).all()
            return {row.item_id: row.state for row in rows}

    def clear(self) -> int:
        """Forget all persisted state. Returns the number of rows removed."""
        with self.get_session() as session:
            rows = session.exec(select(TreeItemState)).all()
            for row in rows:
                session.delete(row)
            session.commit()
            return len(rows)
