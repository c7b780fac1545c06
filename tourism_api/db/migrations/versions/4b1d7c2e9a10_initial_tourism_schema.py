"""initial tourism schema

Revision ID: 4b1d7c2e9a10
Revises:
Create Date: 2026-10-19 10:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "4b1d7c2e9a10"
down_revision = None
branch_labels = None
depends_on = None


user_role_enum = sa.Enum("TOURIST", "GUIDE", "SITE_ADMIN", "SUPER_ADMIN", name="userrole")
booking_status_enum = sa.Enum("PENDING", "CONFIRMED", "COMPLETED", "CANCELED", name="bookingstatus")
payment_status_enum = sa.Enum(
    "PENDING", "COMPLETED", "FAILED", "REFUNDED", "PARTIALLY_REFUNDED", name="paymentstatus"
)


def upgrade():
    # 1️⃣ Users and sites
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(191), nullable=False),
        sa.Column("name", sa.String(191), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(50), nullable=True),
        sa.Column("profile_picture", sa.String(255), nullable=True),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "touristic_sites",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(191), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("location", sa.String(191), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("category", sa.String(191), nullable=True),
        sa.Column("opening_hours", sa.String(191), nullable=True),
        sa.Column("entry_fee", sa.Numeric(10, 2), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_touristic_sites_location", "touristic_sites", ["location"])

    # 2️⃣ Profiles hanging off users
    op.create_table(
        "touristic_site_admins",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("site_id", sa.String(36), sa.ForeignKey("touristic_sites.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id"),
        sa.UniqueConstraint("site_id"),
    )

    op.create_table(
        "tourist_guides",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("languages", sa.JSON(), nullable=False),
        sa.Column("price_per_hour", sa.Numeric(10, 2), nullable=False),
        sa.Column("rating", sa.Float(), nullable=False),
        sa.Column("number_of_reviews", sa.Integer(), nullable=False),
        sa.Column("availability", sa.JSON(), nullable=False),
        sa.UniqueConstraint("user_id"),
        sa.CheckConstraint("price_per_hour >= 0", name="check_guide_price_non_negative"),
    )

    op.create_table(
        "touristic_site_images",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("url", sa.String(255), nullable=False),
        sa.Column(
            "touristic_site_id",
            sa.String(36),
            sa.ForeignKey("touristic_sites.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_touristic_site_images_touristic_site_id", "touristic_site_images", ["touristic_site_id"])

    op.create_table(
        "favorites",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "touristic_site_id",
            sa.String(36),
            sa.ForeignKey("touristic_sites.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id", "touristic_site_id", name="uq_favorite_user_site"),
    )
    op.create_index("ix_favorites_user_id", "favorites", ["user_id"])
    op.create_index("ix_favorites_touristic_site_id", "favorites", ["touristic_site_id"])

    # 3️⃣ Events
    op.create_table(
        "events",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(191), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("max_group_size", sa.Integer(), nullable=False),
        sa.Column(
            "touristic_site_id",
            sa.String(36),
            sa.ForeignKey("touristic_sites.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "site_admin_id",
            sa.String(36),
            sa.ForeignKey("touristic_site_admins.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("guide_id", sa.String(36), sa.ForeignKey("tourist_guides.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("price > 0", name="check_event_price_positive"),
        sa.CheckConstraint("duration > 0", name="check_event_duration_positive"),
        sa.CheckConstraint("max_group_size > 0", name="check_event_group_size_positive"),
    )
    op.create_index("ix_events_touristic_site_id", "events", ["touristic_site_id"])
    op.create_index("ix_events_site_admin_id", "events", ["site_admin_id"])
    op.create_index("ix_events_guide_id", "events", ["guide_id"])

    op.create_table(
        "event_images",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("url", sa.String(255), nullable=False),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_event_images_event_id", "event_images", ["event_id"])

    # 4️⃣ Bookings and what hangs off them
    op.create_table(
        "bookings",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("tourist_id", sa.String(36), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("guide_id", sa.String(36), sa.ForeignKey("tourist_guides.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("booking_date", sa.DateTime(), nullable=False),
        sa.Column("number_of_people", sa.Integer(), nullable=False),
        sa.Column("status", booking_status_enum, nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("number_of_people > 0", name="check_booking_people_positive"),
    )
    op.create_index("ix_bookings_tourist_id", "bookings", ["tourist_id"])
    op.create_index("ix_bookings_event_id", "bookings", ["event_id"])
    op.create_index("ix_bookings_guide_id", "bookings", ["guide_id"])
    op.create_index("ix_bookings_status", "bookings", ["status"])

    op.create_table(
        "payments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("booking_id", sa.String(36), sa.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", sa.String(10), nullable=False),
        sa.Column("method", sa.String(50), nullable=True),
        sa.Column("transaction_id", sa.String(191), nullable=True),
        sa.Column("status", payment_status_enum, nullable=False),
        sa.Column("payment_date", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("booking_id"),
        sa.UniqueConstraint("transaction_id"),
    )
    op.create_index("ix_payments_status", "payments", ["status"])

    op.create_table(
        "reviews",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("tourist_id", sa.String(36), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("booking_id", sa.String(36), sa.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("booking_id"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="check_review_rating_range"),
    )
    op.create_index("ix_reviews_tourist_id", "reviews", ["tourist_id"])


def downgrade():
    op.drop_table("reviews")
    op.drop_table("payments")
    op.drop_table("bookings")
    op.drop_table("event_images")
    op.drop_table("events")
    op.drop_table("favorites")
    op.drop_table("touristic_site_images")
    op.drop_table("tourist_guides")
    op.drop_table("touristic_site_admins")
    op.drop_table("touristic_sites")
    op.drop_table("users")

    bind = op.get_bind()
    payment_status_enum.drop(bind, checkfirst=True)
    booking_status_enum.drop(bind, checkfirst=True)
    user_role_enum.drop(bind, checkfirst=True)
