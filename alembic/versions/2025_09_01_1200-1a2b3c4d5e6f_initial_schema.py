"""initial_schema

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2025-09-01 12:00:00.000000

"""

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision = "1a2b3c4d5e6f"
down_revision = None
branch_labels = None
depends_on = None

email_visibility = sa.Enum("HIDDEN", "FOLLOWING_ONLY", "PUBLIC", name="emailvisibility")
achievement_type = sa.Enum(
    "RECIPE_COUNT", "FAVORITES_COUNT", "FOLLOWERS_COUNT", "MEAL_COUNT", "PHOTO_COUNT",
    "RATINGS_COUNT", "SPECIAL", "COMMENTS_COUNT", "INGREDIENTS_COUNT",
    name="achievementtype"
)
difficulty = sa.Enum("EASY", "MEDIUM", "HARD", name="difficulty")
compliment_type = sa.Enum("MESSAGE", "TIP", name="complimenttype")
payment_status = sa.Enum("PENDING", "COMPLETED", "FAILED", name="paymentstatus")


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("email", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("image", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("bio", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column("instagram_url", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("website_url", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("hashed_password", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("email_visibility", email_visibility, nullable=False, server_default="HIDDEN"),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_email"), "user", ["email"], unique=True)

    op.create_table(
        "follow",
        sa.Column("follower_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("following_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["follower_id"], ["user.id"]),
        sa.ForeignKeyConstraint(["following_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("follower_id", "following_id"),
    )
    op.create_index(op.f("ix_follow_follower_id"), "follow", ["follower_id"])
    op.create_index(op.f("ix_follow_following_id"), "follow", ["following_id"])

    op.create_table(
        "achievement",
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("type", achievement_type, nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("description", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=False),
        sa.Column("icon", sqlmodel.sql.sqltypes.AutoString(length=32), nullable=False),
        sa.Column("color", sqlmodel.sql.sqltypes.AutoString(length=16), nullable=False),
        sa.Column("threshold", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_achievement_type"), "achievement", ["type"])
    op.create_index(op.f("ix_achievement_name"), "achievement", ["name"])

    op.create_table(
        "userachievement",
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("user_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("achievement_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("progress", sa.Integer(), nullable=True),
        sa.Column("earned_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"]),
        sa.ForeignKeyConstraint(["achievement_id"], ["achievement.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
    )
    op.create_index(op.f("ix_userachievement_user_id"), "userachievement", ["user_id"])
    op.create_index(op.f("ix_userachievement_achievement_id"), "userachievement", ["achievement_id"])

    op.create_table(
        "recipe",
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("author_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("title", sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column("description", sqlmodel.sql.sqltypes.AutoString(length=2000), nullable=True),
        sa.Column("ingredients", sa.JSON(), nullable=True),
        sa.Column("instructions", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("cooking_time", sa.Integer(), nullable=True),
        sa.Column("servings", sa.Integer(), nullable=True),
        sa.Column("difficulty", difficulty, nullable=True),
        sa.Column("cuisine", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("image", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["author_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_recipe_author_id"), "recipe", ["author_id"])
    op.create_index(op.f("ix_recipe_title"), "recipe", ["title"])

    op.create_table(
        "rating",
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("user_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("recipe_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"]),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipe.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "recipe_id", name="uq_rating_user_recipe"),
    )
    op.create_index(op.f("ix_rating_user_id"), "rating", ["user_id"])
    op.create_index(op.f("ix_rating_recipe_id"), "rating", ["recipe_id"])

    op.create_table(
        "favorite",
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("user_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("recipe_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"]),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipe.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "recipe_id", name="uq_favorite_user_recipe"),
    )
    op.create_index(op.f("ix_favorite_user_id"), "favorite", ["user_id"])
    op.create_index(op.f("ix_favorite_recipe_id"), "favorite", ["recipe_id"])

    op.create_table(
        "comment",
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("content", sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=False),
        sa.Column("recipe_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("user_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipe.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_comment_recipe_id"), "comment", ["recipe_id"])
    op.create_index(op.f("ix_comment_user_id"), "comment", ["user_id"])

    op.create_table(
        "compliment",
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("type", compliment_type, nullable=False),
        sa.Column("message", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=False),
        sa.Column("tip_amount", sa.Float(), nullable=True),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False),
        sa.Column("from_user_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("to_user_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("recipe_id", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("payment_status", payment_status, nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["from_user_id"], ["user.id"]),
        sa.ForeignKeyConstraint(["to_user_id"], ["user.id"]),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipe.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_compliment_from_user_id"), "compliment", ["from_user_id"])
    op.create_index(op.f("ix_compliment_to_user_id"), "compliment", ["to_user_id"])


def downgrade() -> None:
    for table in ("compliment", "comment", "favorite", "rating", "recipe", "userachievement", "achievement", "follow", "user"):
        op.drop_table(table)

    bind = op.get_bind()
    for enum in (payment_status, compliment_type, difficulty, achievement_type, email_visibility):
        enum.drop(bind, checkfirst=True)
