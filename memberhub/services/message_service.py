from __future__ import annotations

import structlog
from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from memberhub.domain.models import AdminMessageRequest, Conversation, Message, Profile, now_utc
from memberhub.infra.db import new_session
from memberhub.infra.notify import InboxNotifier

logger = structlog.get_logger(__name__)

ADMIN_SENDER_NAME = "Site Admin"


class MessageError(Exception):
    pass


class ValidationError(MessageError):
    pass


def format_message_body(body: str, subject: str | None) -> str:
    if subject:
        return f"**{subject}**\n\n{body}"
    return body


class MessageService:
    def __init__(self, notifier: InboxNotifier | None = None) -> None:
        self._notifier = notifier or InboxNotifier()

    def _find_conversation(self, session: Session, user_a: str, user_b: str) -> Conversation | None:
        statement = select(Conversation).where(
            or_(
                and_(Conversation.participant_one == user_a, Conversation.participant_two == user_b),
                and_(Conversation.participant_one == user_b, Conversation.participant_two == user_a),
            )
        )
        return session.exec(statement).first()

    def find_or_create_conversation(self, session: Session, sender_id: str, recipient_id: str) -> Conversation:
        conversation = self._find_conversation(session, sender_id, recipient_id)
        if conversation is not None:
            return conversation
        conversation = Conversation(
            created_by=sender_id,
            participant_one=sender_id,
            participant_two=recipient_id,
            last_message_at=now_utc(),
        )
        session.add(conversation)
        session.commit()
        session.refresh(conversation)
        return conversation

    def send_admin_message(self, sender_id: str, payload: AdminMessageRequest) -> Message:
        """Deliver a direct message from an admin to one member.

        The caller has already been authorized as a creator profile. Store
        errors propagate as ``MessageError``; the inbox e-mail notification is
        sent only to recipients who opted in and its outcome is ignored.
        """
        recipient_id = payload.recipient_id.strip()
        body = payload.body.strip()
        if not recipient_id:
            raise ValidationError("Recipient ID is required")
        if not body:
            raise ValidationError("Message body cannot be empty")
        if recipient_id == sender_id:
            raise ValidationError("Cannot message yourself")

        try:
            with new_session() as session:
                conversation = self.find_or_create_conversation(session, sender_id, recipient_id)
                message = Message(
                    conversation_id=conversation.id,
                    sender_id=sender_id,
                    body=format_message_body(body, payload.subject),
                )
                session.add(message)
                session.commit()
                session.refresh(message)

                now = now_utc()
                conversation.last_message_at = now
                conversation.updated_at = now
                session.add(conversation)
                session.commit()

                recipient = session.get(Profile, recipient_id)
                notify = recipient is not None and recipient.inbox_emails_enabled is True
        except SQLAlchemyError as exc:
            logger.error("admin_message_failed", sender_id=sender_id, recipient_id=recipient_id, error=str(exc))
            raise MessageError(str(exc)) from exc

        logger.info("admin_message_sent", conversation_id=conversation.id, recipient_id=recipient_id)
        if notify:
            self._notifier.notify_inbox(recipient_id, ADMIN_SENDER_NAME)
        return message
