from __future__ import annotations

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from memberhub.domain.models import AdminToolRead, MemberToolRead, Plan, Profile, Tool, ToolPayload, ToolPlanAccess
from memberhub.domain.slugs import generate_slug
from memberhub.infra.db import new_session

logger = structlog.get_logger(__name__)


class ToolError(Exception):
    pass


class NotFoundError(ToolError):
    pass


class ValidationError(ToolError):
    pass


def _admin_read(tool: Tool, plan_ids: list[str]) -> AdminToolRead:
    return AdminToolRead(
        id=tool.id,
        name=tool.name,
        slug=tool.slug,
        short_description=tool.short_description,
        full_description=tool.full_description,
        image_url=tool.image_url,
        launch_url=tool.launch_url,
        is_active=tool.is_active,
        created_at=tool.created_at,
        plan_ids=plan_ids,
    )


class ToolService:
    def list_member_tools(self, user_id: str | None) -> list[MemberToolRead]:
        """Active tools, oldest first, flagged by whether the user's plan grants them.

        Anonymous callers and lookup failures get an empty catalogue.
        """
        if not user_id:
            return []
        try:
            with new_session() as session:
                tools = session.exec(
                    select(Tool).where(Tool.is_active == True).order_by(col(Tool.created_at))  # noqa: E712
                ).all()
                if not tools:
                    return []
                profile = session.get(Profile, user_id)
                accessible: set[str] = set()
                if profile is not None and profile.plan_id:
                    accessible = set(
                        session.exec(
                            select(ToolPlanAccess.tool_id).where(ToolPlanAccess.plan_id == profile.plan_id)
                        ).all()
                    )
        except SQLAlchemyError as exc:
            logger.error("member_tools_load_failed", user_id=user_id, error=str(exc))
            return []

        return [
            MemberToolRead(
                id=tool.id,
                name=tool.name,
                slug=tool.slug,
                short_description=tool.short_description,
                full_description=tool.full_description,
                image_url=tool.image_url,
                launch_url=tool.launch_url,
                is_available=tool.id in accessible,
            )
            for tool in tools
        ]

    def _replace_plan_access(self, session: Session, tool_id: str, plan_ids: list[str]) -> list[str]:
        wanted = list(dict.fromkeys(plan_ids))
        if wanted:
            known = set(session.exec(select(Plan.id).where(col(Plan.id).in_(wanted))).all())
            unknown = [plan_id for plan_id in wanted if plan_id not in known]
            if unknown:
                raise ValidationError(f"Unknown plan ids: {', '.join(unknown)}")
        for row in session.exec(select(ToolPlanAccess).where(ToolPlanAccess.tool_id == tool_id)).all():
            session.delete(row)
        session.flush()
        for plan_id in wanted:
            session.add(ToolPlanAccess(tool_id=tool_id, plan_id=plan_id))
        return sorted(wanted)

    def _apply(self, tool: Tool, payload: ToolPayload) -> None:
        name = payload.name.strip()
        if not name:
            raise ValidationError("Tool name is required")
        tool.name = name
        tool.slug = generate_slug(name)
        tool.short_description = payload.short_description
        tool.full_description = payload.full_description
        tool.image_url = payload.image_url
        tool.launch_url = payload.launch_url
        tool.is_active = payload.is_active

    def list_tools(self) -> list[AdminToolRead]:
        """Every tool, newest first, with the plans that grant it."""
        with new_session() as session:
            tools = session.exec(select(Tool).order_by(col(Tool.created_at).desc())).all()
            access = session.exec(select(ToolPlanAccess)).all()
        plans_by_tool: dict[str, list[str]] = {}
        for row in access:
            plans_by_tool.setdefault(row.tool_id, []).append(row.plan_id)
        return [_admin_read(tool, sorted(plans_by_tool.get(tool.id, []))) for tool in tools]

    def create_tool(self, payload: ToolPayload) -> AdminToolRead:
        tool = Tool(name=payload.name, slug="")
        self._apply(tool, payload)
        with new_session() as session:
            session.add(tool)
            session.flush()
            plan_ids = self._replace_plan_access(session, tool.id, payload.plan_ids)
            session.commit()
            session.refresh(tool)
        logger.info("tool_created", tool_id=tool.id, plans=plan_ids)
        return _admin_read(tool, plan_ids)

    def update_tool(self, tool_id: str, payload: ToolPayload) -> AdminToolRead:
        """Overwrite the tool fields and replace its plan access set."""
        with new_session() as session:
            tool = session.get(Tool, tool_id)
            if tool is None:
                raise NotFoundError("Tool not found")
            self._apply(tool, payload)
            session.add(tool)
            plan_ids = self._replace_plan_access(session, tool.id, payload.plan_ids)
            session.commit()
            session.refresh(tool)
        logger.info("tool_updated", tool_id=tool_id, plans=plan_ids)
        return _admin_read(tool, plan_ids)

    def delete_tool(self, tool_id: str) -> None:
        with new_session() as session:
            tool = session.get(Tool, tool_id)
            if tool is None:
                raise NotFoundError("Tool not found")
            for row in session.exec(select(ToolPlanAccess).where(ToolPlanAccess.tool_id == tool_id)).all():
                session.delete(row)
            session.flush()
            session.delete(tool)
            session.commit()
        logger.info("tool_deleted", tool_id=tool_id)
