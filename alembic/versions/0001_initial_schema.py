"""Initial marketplace schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

import sqlalchemy as sa

from alembic import op  # type: ignore[attr-defined]

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

# Must match OVERLAP_CONSTRAINT in homestay.db.writers.bookings
OVERLAP_CONSTRAINT = "bookings_no_overlap"


def _timestamps(updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        )
    ]
    if updated:
        columns.append(
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                server_default=sa.func.now(),
                nullable=False,
            )
        )
    return columns


def _user_fk(name: str, nullable: bool = False, cascade: bool = True) -> sa.Column:
    return sa.Column(
        name,
        sa.String(36),
        sa.ForeignKey("users.id", ondelete="CASCADE" if cascade else None),
        nullable=nullable,
        index=True,
    )


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True, index=True),
        sa.Column("first_name", sa.String(100)),
        sa.Column("last_name", sa.String(100)),
        sa.Column("phone", sa.String(32)),
        sa.Column("bio", sa.Text),
        sa.Column("profile_image", sa.String(500)),
        sa.Column("role", sa.String(10), nullable=False, server_default=sa.text("'guest'")),
        sa.Column("is_host", sa.Boolean, nullable=False, server_default=sa.text("FALSE")),
        sa.Column("is_admin", sa.Boolean, nullable=False, server_default=sa.text("FALSE")),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("TRUE")),
        sa.Column("is_verified", sa.Boolean, nullable=False, server_default=sa.text("FALSE")),
        sa.Column("host_since", sa.DateTime(timezone=True)),
        sa.Column("verified_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )

    op.create_table(
        "listings",
        sa.Column("id", sa.String(36), primary_key=True),
        _user_fk("host_id"),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("property_type", sa.String(32), nullable=False),
        sa.Column("city", sa.String(100), nullable=False, index=True),
        sa.Column("area", sa.String(100)),
        sa.Column("district", sa.String(100)),
        sa.Column("bedrooms", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.Column("bathrooms", sa.Float, nullable=False, server_default=sa.text("1")),
        sa.Column("beds", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.Column("max_guests", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.Column("monthly_price", sa.Float, nullable=False),
        sa.Column("cleaning_fee", sa.Float),
        sa.Column("security_deposit", sa.Float),
        sa.Column("min_nights", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.Column("max_nights", sa.Integer),
        sa.Column("instant_book", sa.Boolean, nullable=False, server_default=sa.text("FALSE")),
        sa.Column("check_in_time", sa.String(10)),
        sa.Column("check_out_time", sa.String(10)),
        sa.Column("house_rules", sa.Text),
        sa.Column("photos", sa.JSON),
        sa.Column("average_rating", sa.Float, nullable=False, server_default=sa.text("0")),
        sa.Column("review_count", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("view_count", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("FALSE")),
        sa.Column(
            "status", sa.String(16), nullable=False, server_default=sa.text("'draft'"), index=True
        ),
        sa.Column("deleted_at", sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.CheckConstraint("monthly_price >= 0", name="ck_listings_price_non_negative"),
        sa.CheckConstraint(
            "max_nights IS NULL OR min_nights <= max_nights", name="ck_listings_night_bounds"
        ),
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("booking_code", sa.String(16), nullable=False, unique=True, index=True),
        sa.Column(
            "listing_id",
            sa.String(36),
            sa.ForeignKey("listings.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        _user_fk("guest_id", cascade=False),
        _user_fk("host_id", cascade=False),
        sa.Column("check_in", sa.DateTime(timezone=True), nullable=False),
        sa.Column("check_out", sa.DateTime(timezone=True), nullable=False),
        sa.Column("adults", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.Column("children", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("infants", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("pets", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("guests", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.Column("nightly_rate", sa.Float, nullable=False),
        sa.Column("total_nights", sa.Integer, nullable=False),
        sa.Column("subtotal", sa.Float, nullable=False),
        sa.Column("cleaning_fee", sa.Float, nullable=False, server_default=sa.text("0")),
        sa.Column("service_fee", sa.Float, nullable=False, server_default=sa.text("0")),
        sa.Column("taxes", sa.Float, nullable=False, server_default=sa.text("0")),
        sa.Column("total_price", sa.Float, nullable=False),
        sa.Column("total_amount", sa.Float, nullable=False),
        sa.Column("security_deposit", sa.Float),
        sa.Column("guest_message", sa.Text),
        sa.Column("special_requests", sa.Text),
        sa.Column("arrival_time", sa.String(32)),
        sa.Column("guest_phone", sa.String(32)),
        sa.Column("guest_email", sa.String(255)),
        sa.Column("host_message", sa.Text),
        sa.Column(
            "status", sa.String(16), nullable=False, server_default=sa.text("'PENDING'"), index=True
        ),
        sa.Column(
            "payment_status", sa.String(16), nullable=False, server_default=sa.text("'PENDING'")
        ),
        sa.Column("confirmed_at", sa.DateTime(timezone=True)),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        sa.Column("cancelled_by", sa.String(36)),
        sa.Column("cancel_reason", sa.Text),
        sa.Column("refund_fraction", sa.Float),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        sa.Column("actual_check_in", sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.CheckConstraint("check_in < check_out", name="ck_bookings_dates_ordered"),
    )
    op.create_index(
        "ix_bookings_listing_dates", "bookings", ["listing_id", "check_in", "check_out"]
    )

    if op.get_bind().dialect.name == "postgresql":
        # Store-level guard: no two blocking bookings on a listing may overlap
        op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
        op.execute(
            f"""
            ALTER TABLE bookings ADD CONSTRAINT {OVERLAP_CONSTRAINT}
            EXCLUDE USING gist (
                listing_id WITH =,
                tstzrange(check_in, check_out, '[)') WITH &&
            )
            WHERE (status IN ('PENDING', 'CONFIRMED', 'IN_PROGRESS'))
            """
        )

    op.create_table(
        "reviews",
        sa.Column("id", sa.String(36), primary_key=True),
        _user_fk("reviewer_id"),
        _user_fk("reviewee_id", nullable=True, cascade=False),
        sa.Column(
            "listing_id",
            sa.String(36),
            sa.ForeignKey("listings.id", ondelete="CASCADE"),
            nullable=True,
            index=True,
        ),
        sa.Column(
            "booking_id", sa.String(36), sa.ForeignKey("bookings.id"), nullable=True, index=True
        ),
        sa.Column("overall", sa.Integer, nullable=False),
        sa.Column("cleanliness", sa.Integer),
        sa.Column("accuracy", sa.Integer),
        sa.Column("communication", sa.Integer),
        sa.Column("location", sa.Integer),
        sa.Column("check_in", sa.Integer),
        sa.Column("value", sa.Integer),
        sa.Column("comment", sa.Text),
        *_timestamps(),
        sa.CheckConstraint("overall BETWEEN 1 AND 5", name="ck_reviews_overall_range"),
    )

    op.create_table(
        "conversations",
        sa.Column("id", sa.String(36), primary_key=True),
        _user_fk("participant_one_id"),
        _user_fk("participant_two_id"),
        *_timestamps(),
    )

    op.create_table(
        "messages",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "conversation_id",
            sa.String(36),
            sa.ForeignKey("conversations.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        _user_fk("sender_id", cascade=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("message_type", sa.String(16), nullable=False, server_default=sa.text("'text'")),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default=sa.text("FALSE")),
        sa.Column("read_at", sa.DateTime(timezone=True)),
        *_timestamps(updated=False),
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(36), primary_key=True),
        _user_fk("user_id"),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("data", sa.JSON),
        sa.Column("related_id", sa.String(36)),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default=sa.text("FALSE")),
        sa.Column("read_at", sa.DateTime(timezone=True)),
        *_timestamps(updated=False),
    )

    op.create_table(
        "push_tokens",
        sa.Column("id", sa.String(36), primary_key=True),
        _user_fk("user_id"),
        sa.Column("device_token", sa.String(255), nullable=False),
        sa.Column("platform", sa.String(16), nullable=False, server_default=sa.text("'mobile'")),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("TRUE")),
        *_timestamps(),
    )

    op.create_table(
        "kyc_verifications",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("full_name", sa.String(200)),
        sa.Column("date_of_birth", sa.String(10)),
        sa.Column("nationality", sa.String(64)),
        sa.Column("document_number", sa.String(64)),
        sa.Column("status", sa.String(24), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("rejection_reason", sa.Text),
        sa.Column("reviewed_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )

    op.create_table(
        "kyc_documents",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "kyc_verification_id",
            sa.String(36),
            sa.ForeignKey("kyc_verifications.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("document_type", sa.String(32), nullable=False),
        sa.Column("document_url", sa.String(500), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False, server_default=sa.text("''")),
        sa.Column("file_size", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("mime_type", sa.String(100), nullable=False, server_default=sa.text("''")),
        sa.Column("status", sa.String(16), nullable=False, server_default=sa.text("'uploaded'")),
        *_timestamps(updated=False),
    )

    op.create_table(
        "tax_info",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "host_id",
            sa.String(36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("tax_id_number", sa.String(64)),
        sa.Column("business_name", sa.String(200)),
        sa.Column("business_address", sa.Text),
        sa.Column("tax_classification", sa.String(64)),
        sa.Column("w9_form_url", sa.String(500)),
        sa.Column("status", sa.String(16), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("admin_notes", sa.Text),
        sa.Column("reviewed_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        "tax_info",
        "kyc_documents",
        "kyc_verifications",
        "push_tokens",
        "notifications",
        "messages",
        "conversations",
        "reviews",
        "bookings",
        "listings",
        "users",
    ):
        op.drop_table(table)
