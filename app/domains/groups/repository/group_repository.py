from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.walker_group import WalkerGroup, GroupMember


class GroupRepository:
    def __init__(self, db: Session):
        self.db = db

    # -------------------------------
    # Groups
    # -------------------------------
    def list_active(self, walker_id: str) -> List[WalkerGroup]:
        return (
            self.db.query(WalkerGroup)
            .filter(
                WalkerGroup.walker_id == walker_id,
                WalkerGroup.is_active.is_(True),
            )
            .order_by(WalkerGroup.name.asc())
            .all()
        )

    def get_active(self, group_id: str, walker_id: str) -> Optional[WalkerGroup]:
        return (
            self.db.query(WalkerGroup)
            .filter(
                WalkerGroup.id == group_id,
                WalkerGroup.walker_id == walker_id,
                WalkerGroup.is_active.is_(True),
            )
            .first()
        )

    def create(self, walker_id: str, name: str, description: Optional[str], color: str) -> WalkerGroup:
        group = WalkerGroup(
            walker_id=walker_id,
            name=name,
            description=description,
            color=color,
            is_active=True,
        )
        self.db.add(group)
        self.db.flush()
        return group

    def update(self, group: WalkerGroup, **fields) -> WalkerGroup:
        """Apply only the fields the caller sent; None clears a nullable field."""
        for key, value in fields.items():
            setattr(group, key, value)
        self.db.flush()
        return group

    def soft_delete(self, group: WalkerGroup) -> WalkerGroup:
        group.is_active = False
        self.db.flush()
        return group

    # -------------------------------
    # Members
    # -------------------------------
    def member_ids(self, group_id: str) -> List[str]:
        rows = (
            self.db.query(GroupMember.client_id)
            .filter(GroupMember.group_id == group_id)
            .order_by(GroupMember.created_at.asc())
            .all()
        )
        return [r[0] for r in rows]

    def member_counts(self, group_ids: Iterable[str]) -> Dict[str, int]:
        ids = list(group_ids)
        if not ids:
            return {}
        rows = (
            self.db.query(GroupMember.group_id, func.count(GroupMember.id))
            .filter(GroupMember.group_id.in_(ids))
            .group_by(GroupMember.group_id)
            .all()
        )
        return {group_id: count for group_id, count in rows}

    def replace_members(self, group_id: str, client_ids: Iterable[str]) -> Dict[str, Set[str]]:
        """
        Diff the stored members against the desired set: delete extras, insert
        missing ones. Caller owns the transaction.
        """
        desired = set(client_ids)
        current = set(self.member_ids(group_id))

        to_remove = current - desired
        to_add = desired - current

        if to_remove:
            (
                self.db.query(GroupMember)
                .filter(
                    GroupMember.group_id == group_id,
                    GroupMember.client_id.in_(list(to_remove)),
                )
                .delete(synchronize_session=False)
            )

        for client_id in sorted(to_add):
            self.db.add(GroupMember(group_id=group_id, client_id=client_id))

        self.db.flush()
        return {"added": to_add, "removed": to_remove}
