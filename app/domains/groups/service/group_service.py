import logging
from datetime import datetime
from typing import Dict, Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.auth import SessionContext
from app.domains.affiliations.repository.affiliation_repository import AffiliationRepository
from app.domains.groups.exception import group_error
from app.domains.groups.repository.group_repository import GroupRepository
from app.models.walker_group import WalkerGroup
from app.schemas.groups.group_schema import GroupCreateRequest, GroupUpdateRequest

logger = logging.getLogger(__name__)


def group_to_dict(group: WalkerGroup, member_count: int = 0) -> Dict[str, Any]:
    return {
        "id": group.id,
        "name": group.name,
        "description": group.description,
        "color": group.color,
        "member_count": member_count,
        "created_at": group.created_at,
    }


class GroupService:

    def __init__(self, db: Session):
        self.db = db
        self.repo = GroupRepository(db)

    def _group_response(self, path: str, group: WalkerGroup, status: int = 200):
        count = self.repo.member_counts([group.id]).get(group.id, 0)
        response = {
            "success": True,
            "status": status,
            "group": group_to_dict(group, count),
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=status, content=jsonable_encoder(response))

    def list_groups(self, request: Request, session: SessionContext):
        path = request.url.path

        try:
            groups = self.repo.list_active(session.user_id)
            counts = self.repo.member_counts([g.id for g in groups])
        except Exception as e:
            logger.error("GROUP_LIST_ERROR: %s", e)
            return group_error("GROUP_LIST_500_1", path)

        response = {
            "success": True,
            "status": 200,
            "groups": [group_to_dict(g, counts.get(g.id, 0)) for g in groups],
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))

    def create_group(self, request: Request, session: SessionContext, body: GroupCreateRequest):
        path = request.url.path

        try:
            group = self.repo.create(session.user_id, body.name, body.description, body.color)
            self.db.commit()
            self.db.refresh(group)
        except Exception as e:
            logger.error("GROUP_CREATE_ERROR: %s", e)
            self.db.rollback()
            return group_error("GROUP_SAVE_500_1", path)

        return self._group_response(path, group, status=201)

    def update_group(self, request: Request, session: SessionContext, group_id: str, body: GroupUpdateRequest):
        path = request.url.path

        group = self.repo.get_active(group_id, session.user_id)
        if group is None:
            return group_error("GROUP_404_1", path)

        try:
            self.repo.update(group, **body.model_dump(exclude_unset=True))
            self.db.commit()
            self.db.refresh(group)
        except Exception as e:
            logger.error("GROUP_UPDATE_ERROR: %s", e)
            self.db.rollback()
            return group_error("GROUP_SAVE_500_1", path)

        return self._group_response(path, group)

    def delete_group(self, request: Request, session: SessionContext, group_id: str):
        path = request.url.path

        group = self.repo.get_active(group_id, session.user_id)
        if group is None:
            return group_error("GROUP_404_1", path)

        try:
            self.repo.soft_delete(group)
            self.db.commit()
        except Exception as e:
            logger.error("GROUP_DELETE_ERROR: %s", e)
            self.db.rollback()
            return group_error("GROUP_DELETE_500_1", path)

        return JSONResponse(
            status_code=200,
            content={"success": True, "status": 200, "message": "Grupo eliminado"},
        )

    # ============================================================
    # Members
    # ============================================================
    def _members_response(self, path: str, group_id: str):
        response = {
            "success": True,
            "status": 200,
            "group_id": group_id,
            "client_ids": self.repo.member_ids(group_id),
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=200, content=jsonable_encoder(response))

    def get_members(self, request: Request, session: SessionContext, group_id: str):
        path = request.url.path

        group = self.repo.get_active(group_id, session.user_id)
        if group is None:
            return group_error("GROUP_404_1", path)

        return self._members_response(path, group.id)

    def save_members(self, request: Request, session: SessionContext, group_id: str, client_ids):
        path = request.url.path

        group = self.repo.get_active(group_id, session.user_id)
        if group is None:
            return group_error("GROUP_404_1", path)

        desired = set(client_ids)
        allowed = set(AffiliationRepository(self.db).active_client_ids(session.user_id))
        if not desired.issubset(allowed):
            return group_error("GROUP_MEMBERS_400_1", path)

        try:
            diff = self.repo.replace_members(group.id, desired)
            self.db.commit()
        except Exception as e:
            logger.error("GROUP_MEMBERS_ERROR: %s", e)
            self.db.rollback()
            return group_error("GROUP_MEMBERS_500_1", path)

        logger.info(
            "GROUP_MEMBERS_SAVED: group=%s added=%d removed=%d",
            group.id, len(diff["added"]), len(diff["removed"]),
        )
        return self._members_response(path, group.id)
