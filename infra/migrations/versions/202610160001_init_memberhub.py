"""init memberhub tables

Revision ID: 202610160001
Revises:
Create Date: 2026-10-16
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "202610160001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "auth_users",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_sign_in_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_auth_users_email", "auth_users", ["email"], unique=True)
    op.create_index("ix_auth_users_created_at", "auth_users", ["created_at"])

    op.create_table(
        "plans",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("is_free", sa.Boolean(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("currency", sa.String(), nullable=False),
        sa.Column("billing", sa.String(), nullable=False),
        sa.Column("features", sa.JSON(), nullable=False),
        sa.Column("most_popular", sa.Boolean(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("payment_url", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_plans_slug", "plans", ["slug"], unique=True)
    op.create_index("ix_plans_active", "plans", ["active"])
    op.create_index("ix_plans_created_at", "plans", ["created_at"])

    op.create_table(
        "profiles",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("first_name", sa.String(), nullable=True),
        sa.Column("last_name", sa.String(), nullable=True),
        sa.Column("full_name", sa.String(), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=True),
        sa.Column("is_creator", sa.Boolean(), nullable=False),
        sa.Column("plan_id", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("inbox_emails_enabled", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["id"], ["auth_users.id"]),
        sa.ForeignKeyConstraint(["plan_id"], ["plans.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"])
    op.create_index("ix_profiles_plan_id", "profiles", ["plan_id"])
    op.create_index("ix_profiles_created_at", "profiles", ["created_at"])

    op.create_table(
        "plan_permissions",
        sa.Column("plan_id", sa.String(), nullable=False),
        sa.Column("permission_key", sa.String(), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(["plan_id"], ["plans.id"]),
        sa.PrimaryKeyConstraint("plan_id", "permission_key"),
    )

    op.create_table(
        "tools",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("short_description", sa.String(), nullable=True),
        sa.Column("full_description", sa.String(), nullable=True),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("launch_url", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tools_name", "tools", ["name"])
    op.create_index("ix_tools_slug", "tools", ["slug"])
    op.create_index("ix_tools_is_active", "tools", ["is_active"])
    op.create_index("ix_tools_created_at", "tools", ["created_at"])

    op.create_table(
        "tool_plan_access",
        sa.Column("tool_id", sa.String(), nullable=False),
        sa.Column("plan_id", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(["tool_id"], ["tools.id"]),
        sa.ForeignKeyConstraint(["plan_id"], ["plans.id"]),
        sa.PrimaryKeyConstraint("tool_id", "plan_id"),
    )

    op.create_table(
        "taxonomies",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_taxonomies_type", "taxonomies", ["type"])
    op.create_index("ix_taxonomies_slug", "taxonomies", ["slug"])
    op.create_index("ix_taxonomies_created_at", "taxonomies", ["created_at"])
    op.create_index("ix_taxonomies_type_name", "taxonomies", ["type", "name"])

    op.create_table(
        "groups",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("visibility", sa.String(), nullable=False),
        sa.Column("allow_member_posts", sa.Boolean(), nullable=False),
        sa.Column("require_post_approval", sa.Boolean(), nullable=False),
        sa.Column("allow_member_events", sa.Boolean(), nullable=False),
        sa.Column("allow_member_invites", sa.Boolean(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("updated_by", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_groups_name", "groups", ["name"])
    op.create_index("ix_groups_status", "groups", ["status"])
    op.create_index("ix_groups_created_at", "groups", ["created_at"])

    op.create_table(
        "conversations",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("created_by", sa.String(), nullable=False),
        sa.Column("participant_one", sa.String(), nullable=False),
        sa.Column("participant_two", sa.String(), nullable=False),
        sa.Column("last_message_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_conversations_participant_one", "conversations", ["participant_one"])
    op.create_index("ix_conversations_participant_two", "conversations", ["participant_two"])
    op.create_index("ix_conversations_created_at", "conversations", ["created_at"])
    op.create_index(
        "ix_conversations_participants",
        "conversations",
        ["participant_one", "participant_two"],
    )

    op.create_table(
        "messages",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("conversation_id", sa.String(), nullable=False),
        sa.Column("sender_id", sa.String(), nullable=False),
        sa.Column("body", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["conversation_id"], ["conversations.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_messages_conversation_id", "messages", ["conversation_id"])
    op.create_index("ix_messages_sender_id", "messages", ["sender_id"])
    op.create_index("ix_messages_created_at", "messages", ["created_at"])

    op.create_table(
        "site_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("site_title", sa.String(), nullable=True),
        sa.Column("meta_description", sa.String(), nullable=True),
        sa.Column("brand_primary_color", sa.String(), nullable=True),
        sa.Column("brand_accent_color", sa.String(), nullable=True),
        sa.Column("brand_background_color", sa.String(), nullable=True),
        sa.Column("brand_logo_url", sa.String(), nullable=True),
        sa.Column("favicon_url", sa.String(), nullable=True),
        sa.Column("social_image_url", sa.String(), nullable=True),
        sa.Column("member_navigation", sa.JSON(), nullable=True),
        sa.Column("site_domain", sa.String(), nullable=True),
        sa.Column("upgrade_link", sa.String(), nullable=True),
        sa.Column("billing_link", sa.String(), nullable=True),
        sa.Column("site_terms_url", sa.String(), nullable=True),
        sa.Column("site_privacy_url", sa.String(), nullable=True),
        sa.Column("dashboard_settings", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "site_updates",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("body", sa.String(), nullable=False),
        sa.Column("created_by", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_site_updates_created_by", "site_updates", ["created_by"])
    op.create_index("ix_site_updates_created_at", "site_updates", ["created_at"])

    op.create_table(
        "site_update_reads",
        sa.Column("site_update_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["site_update_id"], ["site_updates.id"]),
        sa.PrimaryKeyConstraint("site_update_id", "user_id"),
    )

    op.create_table(
        "content_entries",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("content_type", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("owner_id", sa.String(), nullable=True),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("video_url", sa.String(), nullable=True),
        sa.Column("audio_url", sa.String(), nullable=True),
        sa.Column("document_url", sa.String(), nullable=True),
        sa.Column("article_body", sa.String(), nullable=True),
        sa.Column("cta_text", sa.String(), nullable=True),
        sa.Column("cta_url", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_content_entries_slug", "content_entries", ["slug"])
    op.create_index("ix_content_entries_content_type", "content_entries", ["content_type"])
    op.create_index("ix_content_entries_status", "content_entries", ["status"])
    op.create_index("ix_content_entries_owner_id", "content_entries", ["owner_id"])
    op.create_index("ix_content_entries_created_at", "content_entries", ["created_at"])

    op.create_table(
        "public_sales_pages",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("page_type", sa.String(), nullable=False),
        sa.Column("hero_logo_url", sa.String(), nullable=True),
        sa.Column("hero_headline", sa.String(), nullable=True),
        sa.Column("hero_intro_text", sa.String(), nullable=True),
        sa.Column("hero_image_url", sa.String(), nullable=True),
        sa.Column("community_vision_headline", sa.String(), nullable=True),
        sa.Column("community_vision_image_url", sa.String(), nullable=True),
        sa.Column("community_vision_body", sa.String(), nullable=True),
        sa.Column("community_vision_bullets", sa.JSON(), nullable=True),
        sa.Column("education_section_headline", sa.String(), nullable=True),
        sa.Column("show_courses_section", sa.Boolean(), nullable=True),
        sa.Column("show_marketplace_section", sa.Boolean(), nullable=True),
        sa.Column("show_ai_mentors_section", sa.Boolean(), nullable=True),
        sa.Column("show_founders_cta_section", sa.Boolean(), nullable=True),
        sa.Column("selected_plan_ids", sa.JSON(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_public_sales_pages_slug", "public_sales_pages", ["slug"], unique=True)
    op.create_index("ix_public_sales_pages_page_type", "public_sales_pages", ["page_type"])

    op.create_table(
        "directory_members",
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("user_id"),
    )


def downgrade() -> None:
    op.drop_table("directory_members")
    op.drop_index("ix_public_sales_pages_page_type", table_name="public_sales_pages")
    op.drop_index("ix_public_sales_pages_slug", table_name="public_sales_pages")
    op.drop_table("public_sales_pages")
    op.drop_index("ix_content_entries_created_at", table_name="content_entries")
    op.drop_index("ix_content_entries_owner_id", table_name="content_entries")
    op.drop_index("ix_content_entries_status", table_name="content_entries")
    op.drop_index("ix_content_entries_content_type", table_name="content_entries")
    op.drop_index("ix_content_entries_slug", table_name="content_entries")
    op.drop_table("content_entries")
    op.drop_table("site_update_reads")
    op.drop_index("ix_site_updates_created_at", table_name="site_updates")
    op.drop_index("ix_site_updates_created_by", table_name="site_updates")
    op.drop_table("site_updates")
    op.drop_table("site_settings")
    op.drop_index("ix_messages_created_at", table_name="messages")
    op.drop_index("ix_messages_sender_id", table_name="messages")
    op.drop_index("ix_messages_conversation_id", table_name="messages")
    op.drop_table("messages")
    op.drop_index("ix_conversations_participants", table_name="conversations")
    op.drop_index("ix_conversations_created_at", table_name="conversations")
    op.drop_index("ix_conversations_participant_two", table_name="conversations")
    op.drop_index("ix_conversations_participant_one", table_name="conversations")
    op.drop_table("conversations")
    op.drop_index("ix_groups_created_at", table_name="groups")
    op.drop_index("ix_groups_status", table_name="groups")
    op.drop_index("ix_groups_name", table_name="groups")
    op.drop_table("groups")
    op.drop_index("ix_taxonomies_type_name", table_name="taxonomies")
    op.drop_index("ix_taxonomies_created_at", table_name="taxonomies")
    op.drop_index("ix_taxonomies_slug", table_name="taxonomies")
    op.drop_index("ix_taxonomies_type", table_name="taxonomies")
    op.drop_table("taxonomies")
    op.drop_table("tool_plan_access")
    op.drop_index("ix_tools_created_at", table_name="tools")
    op.drop_index("ix_tools_is_active", table_name="tools")
    op.drop_index("ix_tools_slug", table_name="tools")
    op.drop_index("ix_tools_name", table_name="tools")
    op.drop_table("tools")
    op.drop_table("plan_permissions")
    op.drop_index("ix_profiles_created_at", table_name="profiles")
    op.drop_index("ix_profiles_plan_id", table_name="profiles")
    op.drop_index("ix_profiles_email", table_name="profiles")
    op.drop_table("profiles")
    op.drop_index("ix_plans_created_at", table_name="plans")
    op.drop_index("ix_plans_active", table_name="plans")
    op.drop_index("ix_plans_slug", table_name="plans")
    op.drop_table("plans")
    op.drop_index("ix_auth_users_created_at", table_name="auth_users")
    op.drop_index("ix_auth_users_email", table_name="auth_users")
    op.drop_table("auth_users")
