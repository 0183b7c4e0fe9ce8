from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from memberhub.console.client import ConsoleClient, ConsoleError
from memberhub.domain.slugs import generate_slug, is_valid_slug

NAME_REQUIRED = "Name is required"
SLUG_REQUIRED = "Slug is required"
SLUG_INVALID = "Slug must contain only lowercase letters, numbers, and hyphens"


@dataclass
class TaxonomyForm:
    """Create/edit form state for one taxonomy type.

    In create mode the slug follows the name until the slug is typed in by
    hand. Edit mode starts with auto-update off.
    """

    taxonomy_type: str
    name: str = ""
    slug: str = ""
    taxonomy_id: str | None = None
    slug_auto_update: bool = True
    errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def for_existing(cls, taxonomy_type: str, item: dict[str, Any]) -> TaxonomyForm:
        return cls(
            taxonomy_type=taxonomy_type,
            name=item["name"],
            slug=item["slug"],
            taxonomy_id=item["id"],
            slug_auto_update=False,
        )

    @property
    def is_edit(self) -> bool:
        return self.taxonomy_id is not None

    def set_name(self, value: str) -> None:
        self.name = value
        if self.slug_auto_update:
            self.slug = generate_slug(value)

    def set_slug(self, value: str) -> None:
        self.slug = value
        self.slug_auto_update = False

    def validate(self) -> bool:
        errors: dict[str, str] = {}
        if not self.name.strip():
            errors["name"] = NAME_REQUIRED
        if not self.slug.strip():
            errors["slug"] = SLUG_REQUIRED
        elif not is_valid_slug(self.slug):
            errors["slug"] = SLUG_INVALID
        self.errors = errors
        return not errors

    def submit(self, client: ConsoleClient) -> dict[str, Any] | None:
        """Save the form; returns the stored row, or None when invalid or rejected."""
        if not self.validate():
            return None
        try:
            if self.taxonomy_id is not None:
                return client.update_taxonomy(self.taxonomy_id, self.name.strip(), self.slug.strip())
            return client.create_taxonomy(self.taxonomy_type, self.name.strip(), self.slug.strip())
        except ConsoleError as exc:
            self.errors = {"form": exc.message}
            return None
