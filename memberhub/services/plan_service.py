from __future__ import annotations

import secrets
import string

import structlog
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from memberhub.domain.models import Plan, PlanPayload, PlanPermission, Profile, ToolPlanAccess
from memberhub.infra.db import new_session

logger = structlog.get_logger(__name__)

COPY_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
COPY_SUFFIX_LENGTH = 6


class PlanError(Exception):
    pass


class NotFoundError(PlanError):
    pass


class ConflictError(PlanError):
    pass


def copy_suffix() -> str:
    return "".join(secrets.choice(COPY_SUFFIX_ALPHABET) for _ in range(COPY_SUFFIX_LENGTH))


class PlanService:
    def _get_plan(self, session: Session, plan_id: str) -> Plan:
        plan = session.get(Plan, plan_id)
        if plan is None:
            raise NotFoundError("Plan not found")
        return plan

    def _commit(self, session: Session, plan: Plan) -> Plan:
        session.add(plan)
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            raise ConflictError("plan slug already exists") from exc
        session.refresh(plan)
        return plan

    def list_plans(self) -> list[Plan]:
        with new_session() as session:
            statement = select(Plan).order_by(col(Plan.sort_order), col(Plan.name))
            return list(session.exec(statement).all())

    def create_plan(self, payload: PlanPayload) -> Plan:
        with new_session() as session:
            plan = self._commit(session, Plan(**payload.model_dump()))
        logger.info("plan_created", plan_id=plan.id, slug=plan.slug)
        return plan

    def update_plan(self, plan_id: str, payload: PlanPayload) -> Plan:
        with new_session() as session:
            plan = self._get_plan(session, plan_id)
            for key, value in payload.model_dump().items():
                setattr(plan, key, value)
            return self._commit(session, plan)

    def set_active(self, plan_id: str, active: bool) -> Plan:
        with new_session() as session:
            plan = self._get_plan(session, plan_id)
            plan.active = active
            return self._commit(session, plan)

    def duplicate_plan(self, plan_id: str) -> Plan:
        """Copy a plan as an inactive draft with a unique slug."""
        with new_session() as session:
            source = self._get_plan(session, plan_id)
            duplicate = Plan(
                name=f"{source.name} (Copy)",
                slug=f"{source.slug}-copy-{copy_suffix()}",
                description=source.description,
                is_free=source.is_free,
                price=source.price,
                currency=source.currency,
                billing=source.billing,
                features=list(source.features),
                most_popular=source.most_popular,
                sort_order=source.sort_order,
                active=False,
            )
            return self._commit(session, duplicate)

    def delete_plan(self, plan_id: str) -> None:
        with new_session() as session:
            plan = self._get_plan(session, plan_id)
            assigned = session.exec(
                select(func.count()).select_from(Profile).where(Profile.plan_id == plan_id)
            ).one()
            if assigned > 0:
                raise ConflictError("Plan is assigned to members and cannot be deleted")
            for permission in session.exec(select(PlanPermission).where(PlanPermission.plan_id == plan_id)).all():
                session.delete(permission)
            for access in session.exec(select(ToolPlanAccess).where(ToolPlanAccess.plan_id == plan_id)).all():
                session.delete(access)
            session.flush()
            session.delete(plan)
            session.commit()
        logger.info("plan_deleted", plan_id=plan_id)

    def list_permissions(self, plan_id: str) -> list[PlanPermission]:
        with new_session() as session:
            self._get_plan(session, plan_id)
            statement = select(PlanPermission).where(PlanPermission.plan_id == plan_id)
            return list(session.exec(statement).all())

    def set_permission(self, plan_id: str, permission_key: str, enabled: bool) -> PlanPermission:
        """Upsert on (plan_id, permission_key)."""
        with new_session() as session:
            self._get_plan(session, plan_id)
            row = session.get(PlanPermission, (plan_id, permission_key))
            if row is None:
                row = PlanPermission(plan_id=plan_id, permission_key=permission_key, enabled=enabled)
            else:
                row.enabled = enabled
            session.add(row)
            session.commit()
            session.refresh(row)
            return row
