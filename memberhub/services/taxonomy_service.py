from __future__ import annotations

import structlog
from sqlmodel import Session, select

from memberhub.domain.models import Taxonomy, TaxonomyCreate, TaxonomyType, TaxonomyUpdate
from memberhub.infra.db import new_session

logger = structlog.get_logger(__name__)


class TaxonomyError(Exception):
    pass


class NotFoundError(TaxonomyError):
    pass


class TaxonomyService:
    """Tags and categories, one table split by ``type``.

    Names and slugs are trimmed but not re-validated here; slug rules live in
    the console form. Duplicate slugs within a type are accepted.
    """

    def _get_taxonomy(self, session: Session, taxonomy_id: str) -> Taxonomy:
        taxonomy = session.get(Taxonomy, taxonomy_id)
        if taxonomy is None:
            raise NotFoundError("taxonomy not found")
        return taxonomy

    def list_by_type(self, taxonomy_type: TaxonomyType) -> list[Taxonomy]:
        with new_session() as session:
            statement = select(Taxonomy).where(Taxonomy.type == taxonomy_type).order_by(Taxonomy.name)
            return list(session.exec(statement).all())

    def create(self, payload: TaxonomyCreate) -> Taxonomy:
        with new_session() as session:
            taxonomy = Taxonomy(
                type=payload.type,
                name=payload.name.strip(),
                slug=payload.slug.strip(),
            )
            session.add(taxonomy)
            session.commit()
            session.refresh(taxonomy)
        logger.info("taxonomy_created", taxonomy_id=taxonomy.id, type=taxonomy.type, slug=taxonomy.slug)
        return taxonomy

    def update(self, taxonomy_id: str, payload: TaxonomyUpdate) -> Taxonomy:
        with new_session() as session:
            taxonomy = self._get_taxonomy(session, taxonomy_id)
            taxonomy.name = payload.name.strip()
            taxonomy.slug = payload.slug.strip()
            session.add(taxonomy)
            session.commit()
            session.refresh(taxonomy)
            return taxonomy

    def delete(self, taxonomy_id: str) -> None:
        with new_session() as session:
            taxonomy = self._get_taxonomy(session, taxonomy_id)
            session.delete(taxonomy)
            session.commit()
        logger.info("taxonomy_deleted", taxonomy_id=taxonomy_id)
