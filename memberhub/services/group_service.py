from __future__ import annotations

import structlog

from memberhub.domain.models import Group, GroupUpdate, now_utc
from memberhub.infra.db import new_session

logger = structlog.get_logger(__name__)


class GroupError(Exception):
    pass


class NotFoundError(GroupError):
    pass


class GroupService:
    def update_group(self, group_id: str, payload: GroupUpdate, updated_by: str) -> Group:
        with new_session() as session:
            group = session.get(Group, group_id)
            if group is None or group.deleted_at is not None:
                raise NotFoundError("Group not found")
            for key, value in payload.model_dump().items():
                setattr(group, key, value)
            group.updated_by = updated_by
            group.updated_at = now_utc()
            session.add(group)
            session.commit()
            session.refresh(group)
        logger.info("group_updated", group_id=group_id, updated_by=updated_by)
        return group
