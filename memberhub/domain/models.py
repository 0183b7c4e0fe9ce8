from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField
from sqlalchemy import JSON, Column, Index
from sqlmodel import Field, SQLModel


def now_utc() -> datetime:
    return datetime.now(UTC)


def new_id() -> str:
    return str(uuid4())


class TaxonomyType(StrEnum):
    CATEGORY = "category"
    CONTENT_TAG = "content_tag"
    EXPERT_TAG = "expert_tag"


class ContentStatus(StrEnum):
    DRAFT = "draft"
    PUBLISHED = "published"


class GroupVisibility(StrEnum):
    PUBLIC = "public"
    REQUEST = "request"
    PRIVATE = "private"


class SalesPageType(StrEnum):
    MAIN = "main"
    FOUNDERS = "founders"


# --- tables -----------------------------------------------------------------


class AuthUser(SQLModel, table=True):
    __tablename__ = "auth_users"

    id: str = Field(default_factory=new_id, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    created_at: datetime = Field(default_factory=now_utc, index=True)
    last_sign_in_at: datetime | None = None


class Profile(SQLModel, table=True):
    __tablename__ = "profiles"

    id: str = Field(foreign_key="auth_users.id", primary_key=True)
    email: str | None = Field(default=None, index=True)
    first_name: str | None = None
    last_name: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None
    role: str | None = None
    is_creator: bool = Field(default=False)
    plan_id: str | None = Field(default=None, foreign_key="plans.id", index=True)
    is_active: bool = Field(default=True)
    is_public: bool = Field(default=False)
    inbox_emails_enabled: bool = Field(default=False)
    created_at: datetime = Field(default_factory=now_utc, index=True)
    updated_at: datetime = Field(default_factory=now_utc)


class Plan(SQLModel, table=True):
    __tablename__ = "plans"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    slug: str = Field(index=True, unique=True)
    description: str = ""
    is_free: bool = Field(default=False)
    price: float = Field(default=0)
    currency: str = Field(default="USD")
    billing: str = Field(default="monthly")
    features: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    most_popular: bool = Field(default=False)
    active: bool = Field(default=True, index=True)
    sort_order: int = Field(default=0)
    payment_url: str | None = None
    created_at: datetime = Field(default_factory=now_utc, index=True)


class PlanPermission(SQLModel, table=True):
    __tablename__ = "plan_permissions"

    plan_id: str = Field(foreign_key="plans.id", primary_key=True)
    permission_key: str = Field(primary_key=True)
    enabled: bool = Field(default=False)


class Tool(SQLModel, table=True):
    __tablename__ = "tools"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(index=True)
    slug: str = Field(index=True)
    short_description: str | None = None
    full_description: str | None = None
    image_url: str | None = None
    launch_url: str | None = None
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=now_utc, index=True)


class ToolPlanAccess(SQLModel, table=True):
    __tablename__ = "tool_plan_access"

    tool_id: str = Field(foreign_key="tools.id", primary_key=True)
    plan_id: str = Field(foreign_key="plans.id", primary_key=True)


class Taxonomy(SQLModel, table=True):
    __tablename__ = "taxonomies"
    __table_args__ = (Index("ix_taxonomies_type_name", "type", "name"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    type: TaxonomyType = Field(index=True)
    name: str
    slug: str = Field(index=True)
    created_at: datetime = Field(default_factory=now_utc, index=True)


class Group(SQLModel, table=True):
    __tablename__ = "groups"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(index=True)
    description: str | None = None
    visibility: GroupVisibility = Field(default=GroupVisibility.PUBLIC)
    allow_member_posts: bool = Field(default=True)
    require_post_approval: bool = Field(default=False)
    allow_member_events: bool = Field(default=False)
    allow_member_invites: bool = Field(default=False)
    status: str = Field(default="active", index=True)
    created_by: str | None = None
    updated_by: str | None = None
    created_at: datetime = Field(default_factory=now_utc, index=True)
    updated_at: datetime = Field(default_factory=now_utc)
    deleted_at: datetime | None = None


class Conversation(SQLModel, table=True):
    __tablename__ = "conversations"
    __table_args__ = (Index("ix_conversations_participants", "participant_one", "participant_two"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    created_by: str
    participant_one: str = Field(index=True)
    participant_two: str = Field(index=True)
    last_message_at: datetime | None = None
    created_at: datetime = Field(default_factory=now_utc, index=True)
    updated_at: datetime = Field(default_factory=now_utc)


class Message(SQLModel, table=True):
    __tablename__ = "messages"

    id: str = Field(default_factory=new_id, primary_key=True)
    conversation_id: str = Field(foreign_key="conversations.id", index=True)
    sender_id: str = Field(index=True)
    body: str
    created_at: datetime = Field(default_factory=now_utc, index=True)


class SiteSettings(SQLModel, table=True):
    __tablename__ = "site_settings"

    id: int = Field(default=1, primary_key=True)
    site_title: str | None = None
    meta_description: str | None = None
    brand_primary_color: str | None = None
    brand_accent_color: str | None = None
    brand_background_color: str | None = None
    brand_logo_url: str | None = None
    favicon_url: str | None = None
    social_image_url: str | None = None
    # Either a list of {id, label, order, visible} or that list serialized as a JSON string.
    member_navigation: Any = Field(default=None, sa_column=Column(JSON, nullable=True))
    site_domain: str | None = None
    upgrade_link: str | None = None
    billing_link: str | None = None
    site_terms_url: str | None = None
    site_privacy_url: str | None = None
    dashboard_settings: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )
    updated_at: datetime = Field(default_factory=now_utc)


class SiteUpdate(SQLModel, table=True):
    __tablename__ = "site_updates"

    id: str = Field(default_factory=new_id, primary_key=True)
    title: str
    body: str
    created_by: str = Field(index=True)
    created_at: datetime = Field(default_factory=now_utc, index=True)


class SiteUpdateReceipt(SQLModel, table=True):
    __tablename__ = "site_update_reads"

    site_update_id: str = Field(foreign_key="site_updates.id", primary_key=True)
    user_id: str = Field(primary_key=True)
    read_at: datetime = Field(default_factory=now_utc)


class ContentEntry(SQLModel, table=True):
    __tablename__ = "content_entries"

    id: str = Field(default_factory=new_id, primary_key=True)
    slug: str | None = Field(default=None, index=True)
    title: str
    description: str | None = None
    content_type: str = Field(index=True)
    # Free-text category name, or a taxonomy id.
    category: str | None = None
    status: ContentStatus = Field(default=ContentStatus.DRAFT, index=True)
    published_at: datetime | None = None
    owner_id: str | None = Field(default=None, foreign_key="profiles.id", index=True)
    image_url: str | None = None
    video_url: str | None = None
    audio_url: str | None = None
    document_url: str | None = None
    article_body: str | None = None
    cta_text: str | None = None
    cta_url: str | None = None
    created_at: datetime = Field(default_factory=now_utc, index=True)


class PublicSalesPage(SQLModel, table=True):
    __tablename__ = "public_sales_pages"

    id: str = Field(default_factory=new_id, primary_key=True)
    slug: str = Field(index=True, unique=True)
    page_type: SalesPageType = Field(index=True)
    hero_logo_url: str | None = None
    hero_headline: str | None = None
    hero_intro_text: str | None = None
    hero_image_url: str | None = None
    community_vision_headline: str | None = None
    community_vision_image_url: str | None = None
    community_vision_body: str | None = None
    community_vision_bullets: list[str] | None = Field(default=None, sa_column=Column(JSON, nullable=True))
    education_section_headline: str | None = None
    show_courses_section: bool | None = None
    show_marketplace_section: bool | None = None
    show_ai_mentors_section: bool | None = None
    show_founders_cta_section: bool | None = None
    selected_plan_ids: list[str] | None = Field(default=None, sa_column=Column(JSON, nullable=True))
    updated_at: datetime = Field(default_factory=now_utc)


class DirectoryMember(SQLModel, table=True):
    __tablename__ = "directory_members"

    user_id: str = Field(foreign_key="profiles.id", primary_key=True)
    created_at: datetime = Field(default_factory=now_utc)


# --- request / response models ----------------------------------------------


class ORMReadModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class ActionResult(BaseModel):
    success: bool = True
    error: str | None = None


class SignUpRequest(BaseModel):
    email: str = PydanticField(min_length=3)
    password: str = PydanticField(min_length=8)
    first_name: str = PydanticField(min_length=1)
    last_name: str = PydanticField(min_length=1)


class SignInRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    refresh_token: str | None = None


class CurrentUser(BaseModel):
    id: str
    email: str


class ProfileRead(ORMReadModel):
    id: str
    email: str | None
    first_name: str | None
    last_name: str | None
    full_name: str | None
    avatar_url: str | None
    role: str | None
    is_creator: bool
    plan_id: str | None
    is_active: bool


class TaxonomyCreate(BaseModel):
    type: TaxonomyType
    name: str
    slug: str


class TaxonomyUpdate(BaseModel):
    name: str
    slug: str


class TaxonomyRead(ORMReadModel):
    id: str
    type: TaxonomyType
    name: str
    slug: str
    created_at: datetime


class ContentOwnerRead(BaseModel):
    full_name: str | None
    avatar_url: str | None


class AdminContentListItem(BaseModel):
    id: str
    slug: str | None
    title: str
    content_type: str
    category: str | None
    status: ContentStatus
    published_at: datetime | None
    created_at: datetime
    owner: ContentOwnerRead | None


class ContentMediaRead(BaseModel):
    video_url: str | None = None
    audio_url: str | None = None
    document_url: str | None = None
    article_body: str | None = None


class AdminContentDetail(BaseModel):
    id: str
    slug: str | None
    title: str
    description: str | None
    content_type: str
    image: str | None
    author: str | None
    author_image: str | None
    status: ContentStatus
    published_at: datetime | None
    cta_text: str | None
    cta_url: str | None
    full_content: ContentMediaRead


class ContentStatusRequest(BaseModel):
    next_status: ContentStatus


class AdminMessageRequest(BaseModel):
    recipient_id: str
    subject: str | None = None
    body: str


class PlanPayload(BaseModel):
    name: str
    slug: str
    description: str = ""
    is_free: bool = False
    price: float = 0
    currency: str = "USD"
    billing: str = "monthly"
    features: list[str] = PydanticField(default_factory=list)
    most_popular: bool = False
    active: bool = True
    sort_order: int = 0
    payment_url: str | None = None


class PlanRead(ORMReadModel):
    id: str
    name: str
    slug: str
    description: str
    is_free: bool
    price: float
    currency: str
    billing: str
    features: list[str]
    most_popular: bool
    active: bool
    sort_order: int
    payment_url: str | None


class PlanActiveRequest(BaseModel):
    active: bool


class PlanPermissionRead(ORMReadModel):
    permission_key: str
    enabled: bool


class PlanPermissionToggleRequest(BaseModel):
    enabled: bool


class PlanPermissionsRead(BaseModel):
    directory_listing: bool = False
    create_groups: bool = False
    create_events: bool = False
    offer_content: bool = False
    offer_services: bool = False
    offer_products: bool = False


class MemberPlanRequest(BaseModel):
    plan_id: str


class AssignPlanRequest(BaseModel):
    user_id: str
    plan_id: str


class MemberStatusRequest(BaseModel):
    is_active: bool


class GroupUpdate(BaseModel):
    name: str
    description: str | None = None
    visibility: GroupVisibility
    allow_member_posts: bool
    require_post_approval: bool
    allow_member_events: bool
    allow_member_invites: bool


class GroupRead(ORMReadModel):
    id: str
    name: str
    description: str | None
    visibility: GroupVisibility
    allow_member_posts: bool
    require_post_approval: bool
    allow_member_events: bool
    allow_member_invites: bool
    updated_by: str | None
    updated_at: datetime


class DashboardSettingsPayload(BaseModel):
    header_image_url: str | None = None
    featured_tools: list[str] | None = None
    featured_groups: list[str] | None = None
    featured_content: list[str] | None = None
    featured_experts: list[str] | None = None


class SiteSettingsUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    brand_primary_color: str | None = None
    brand_accent_color: str | None = None
    brand_background_color: str | None = None
    brand_logo_url: str | None = None
    site_title: str | None = None
    meta_description: str | None = None
    favicon_url: str | None = None
    social_image_url: str | None = None
    member_navigation: list[dict[str, Any]] | None = None
    site_domain: str | None = None
    upgrade_link: str | None = None
    billing_link: str | None = None
    site_terms_url: str | None = None
    site_privacy_url: str | None = None
    dashboard_settings: DashboardSettingsPayload | None = None


class SiteSettingsRead(ORMReadModel):
    site_title: str | None
    meta_description: str | None
    brand_primary_color: str | None
    brand_accent_color: str | None
    brand_background_color: str | None
    brand_logo_url: str | None
    favicon_url: str | None
    social_image_url: str | None
    member_navigation: Any
    site_domain: str | None
    upgrade_link: str | None
    billing_link: str | None
    site_terms_url: str | None
    site_privacy_url: str | None
    dashboard_settings: dict[str, Any]
    updated_at: datetime


class NamedOption(BaseModel):
    id: str
    name: str


class ContentOption(BaseModel):
    id: str
    title: str
    content_type: str
    image_url: str | None


class DashboardDropdownData(BaseModel):
    tools: list[NamedOption]
    groups: list[NamedOption]
    content_items: list[ContentOption]
    dashboard_settings: DashboardSettingsPayload


class NavigationItem(BaseModel):
    key: str
    label: str


class MenuItem(BaseModel):
    key: str
    label: str
    href: str
    icon: str


class ShellUserRead(BaseModel):
    email: str
    full_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    role: str | None = None
    is_creator: bool = False


class MemberShellRead(BaseModel):
    user: ShellUserRead
    sidebar_labels: dict[str, str]
    member_navigation: list[NavigationItem]
    menu: list[MenuItem]
    brand_logo_url: str | None
    brand_accent_color: str | None
    site_title: str | None
    site_terms_url: str | None
    site_privacy_url: str | None
    billing_link: str | None


class MemberToolRead(BaseModel):
    id: str
    name: str
    slug: str
    short_description: str | None
    full_description: str | None
    image_url: str | None
    launch_url: str | None
    is_available: bool


class ToolPayload(BaseModel):
    name: str = PydanticField(min_length=1)
    short_description: str | None = None
    full_description: str | None = None
    image_url: str | None = None
    launch_url: str | None = None
    is_active: bool = True
    plan_ids: list[str] = PydanticField(default_factory=list)


class AdminToolRead(BaseModel):
    id: str
    name: str
    slug: str
    short_description: str | None
    full_description: str | None
    image_url: str | None
    launch_url: str | None
    is_active: bool
    created_at: datetime
    plan_ids: list[str]


class SiteUpdateCreate(BaseModel):
    title: str = PydanticField(min_length=1)
    body: str = PydanticField(min_length=1)


class SiteUpdateRead(ORMReadModel):
    id: str
    title: str
    body: str
    created_at: datetime


class MemberSiteUpdateRead(BaseModel):
    id: str
    title: str
    body: str
    created_at: datetime
    admin_name: str
    admin_avatar_url: str | None
    is_read: bool


class SalesPageRead(ORMReadModel):
    slug: str
    page_type: SalesPageType
    hero_logo_url: str | None
    hero_headline: str | None
    hero_intro_text: str | None
    hero_image_url: str | None
    community_vision_headline: str | None
    community_vision_image_url: str | None
    community_vision_body: str | None
    community_vision_bullets: list[str] | None
    education_section_headline: str | None
    show_courses_section: bool | None
    show_marketplace_section: bool | None
    show_ai_mentors_section: bool | None
    show_founders_cta_section: bool | None
    selected_plan_ids: list[str] | None


class CommunityVisionUpdate(BaseModel):
    community_vision_headline: str | None = None
    community_vision_image_url: str | None = None
    community_vision_body: str | None = None
    community_vision_bullets: list[str] | None = None


class EducationSectionUpdate(BaseModel):
    education_section_headline: str | None = None


class SectionVisibilityUpdate(BaseModel):
    show_courses_section: bool | None = None
    show_marketplace_section: bool | None = None
    show_ai_mentors_section: bool | None = None
    show_founders_cta_section: bool | None = None


class HeroSectionUpdate(BaseModel):
    hero_logo_url: str | None = None
    hero_headline: str | None = None
    hero_intro_text: str | None = None
    hero_image_url: str | None = None


class SalesPagePlansUpdate(BaseModel):
    selected_plan_ids: list[str]


class SalesPagePlanRead(ORMReadModel):
    id: str
    name: str
    price: float
    currency: str
    billing: str
    features: list[str]
    most_popular: bool
    payment_url: str | None


class PublicSalesPageRead(BaseModel):
    sales_page: SalesPageRead | None
    ordered_plans: list[SalesPagePlanRead]
