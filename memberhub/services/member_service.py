from __future__ import annotations

import structlog
from sqlmodel import Session, select

from memberhub.domain.models import DirectoryMember, Plan, PlanPermission, Profile, now_utc
from memberhub.domain.permissions import PERM_DIRECTORY_LISTING
from memberhub.infra.db import new_session
from memberhub.infra.events import PROFILE_PLAN_CHANGED, event_bus

logger = structlog.get_logger(__name__)


class MemberError(Exception):
    pass


class NotFoundError(MemberError):
    pass


def _remove_from_directory(session: Session, profile_id: str) -> None:
    entry = session.get(DirectoryMember, profile_id)
    if entry is not None:
        session.delete(entry)


class MemberService:
    def _get_profile(self, session: Session, profile_id: str) -> Profile:
        profile = session.get(Profile, profile_id)
        if profile is None:
            raise NotFoundError("Member not found")
        return profile

    def update_member_plan(self, profile_id: str, plan_id: str) -> Profile:
        """Move a member to another plan.

        A plan without ``directory_listing`` hides the member and drops their
        directory entry; a plan with it leaves visibility for the member to
        opt back into.
        """
        with new_session() as session:
            profile = self._get_profile(session, profile_id)
            if session.get(Plan, plan_id) is None:
                raise NotFoundError("Plan not found")
            profile.plan_id = plan_id
            profile.updated_at = now_utc()

            permission = session.exec(
                select(PlanPermission).where(
                    PlanPermission.plan_id == plan_id,
                    PlanPermission.permission_key == PERM_DIRECTORY_LISTING,
                )
            ).first()
            if permission is None or permission.enabled is not True:
                profile.is_public = False
                _remove_from_directory(session, profile_id)

            session.add(profile)
            session.commit()
            session.refresh(profile)
        logger.info("member_plan_updated", profile_id=profile_id, plan_id=plan_id)
        event_bus.publish_dict(PROFILE_PLAN_CHANGED, profile_id, {"plan_id": plan_id})
        return profile

    def update_member_status(self, profile_id: str, is_active: bool) -> Profile:
        # Unsuspending restores is_active only; directory visibility stays off.
        with new_session() as session:
            profile = self._get_profile(session, profile_id)
            profile.is_active = is_active
            if not is_active:
                profile.is_public = False
                _remove_from_directory(session, profile_id)
            profile.updated_at = now_utc()
            session.add(profile)
            session.commit()
            session.refresh(profile)
        logger.info("member_status_updated", profile_id=profile_id, is_active=is_active)
        return profile
