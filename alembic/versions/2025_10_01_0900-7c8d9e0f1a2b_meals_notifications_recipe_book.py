"""meals, notifications and recipe book

Revision ID: 7c8d9e0f1a2b
Revises: 1a2b3c4d5e6f
Create Date: 2025-10-01 09:00:00.000000

"""

from alembic import op
import sqlalchemy as sa
import sqlmodel


revision = "7c8d9e0f1a2b"
down_revision = "1a2b3c4d5e6f"
branch_labels = None
depends_on = None

notification_type = sa.Enum(
    "NEW_FOLLOWER", "RECIPE_COMMENT", "COMPLIMENT_RECEIVED", "NEW_RECIPE_FROM_FOLLOWING",
    name="notificationtype"
)

NOTIFICATION_PREFERENCES = (
    "notify_on_new_follower",
    "notify_on_recipe_comment",
    "notify_on_compliment",
    "notify_on_new_recipe_from_following",
)


def upgrade() -> None:
    for column in NOTIFICATION_PREFERENCES:
        op.add_column("user", sa.Column(column, sa.Boolean(), nullable=False, server_default=sa.true()))

    op.create_table(
        "meal",
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("author_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column("description", sqlmodel.sql.sqltypes.AutoString(length=2000), nullable=True),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["author_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_meal_author_id"), "meal", ["author_id"])
    op.create_index(op.f("ix_meal_is_public"), "meal", ["is_public"])

    op.create_table(
        "mealimage",
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("meal_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("url", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("caption", sqlmodel.sql.sqltypes.AutoString(length=300), nullable=True),
        sa.Column("alt", sqlmodel.sql.sqltypes.AutoString(length=300), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("is_primary", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["meal_id"], ["meal.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_mealimage_meal_id"), "mealimage", ["meal_id"])

    op.create_table(
        "notification",
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("user_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("from_user_id", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("type", notification_type, nullable=False),
        sa.Column("title", sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column("message", sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column("related_recipe_id", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("related_comment_id", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("related_compliment_id", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"]),
        sa.ForeignKeyConstraint(["from_user_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_notification_user_id"), "notification", ["user_id"])
    op.create_index(op.f("ix_notification_is_read"), "notification", ["is_read"])
    op.create_index(op.f("ix_notification_created_at"), "notification", ["created_at"])

    op.create_table(
        "recipebookcategory",
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("user_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("description", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column("color", sqlmodel.sql.sqltypes.AutoString(length=20), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "name", name="uq_recipe_book_category_user_name"),
    )
    op.create_index(op.f("ix_recipebookcategory_user_id"), "recipebookcategory", ["user_id"])

    op.create_table(
        "recipebookentry",
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("user_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("recipe_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("category_id", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("notes", sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column("added_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"]),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipe.id"]),
        sa.ForeignKeyConstraint(["category_id"], ["recipebookcategory.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "recipe_id", "category_id", name="uq_recipe_book_entry"),
    )
    op.create_index(op.f("ix_recipebookentry_user_id"), "recipebookentry", ["user_id"])
    op.create_index(op.f("ix_recipebookentry_recipe_id"), "recipebookentry", ["recipe_id"])


def downgrade() -> None:
    for table in ("recipebookentry", "recipebookcategory", "notification", "mealimage", "meal"):
        op.drop_table(table)

    notification_type.drop(op.get_bind(), checkfirst=True)

    for column in NOTIFICATION_PREFERENCES:
        op.drop_column("user", column)
