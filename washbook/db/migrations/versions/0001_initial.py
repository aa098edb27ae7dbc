from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

DAYS = ("SUNDAY", "MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY")


def upgrade() -> None:
    op.create_table(
        "networks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "locations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("network_id", sa.Integer(), sa.ForeignKey("networks.id", ondelete="CASCADE")),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("code", sa.String(length=32)),
        sa.Column("city", sa.String(length=128)),
        sa.Column("address", sa.String(length=255)),
        sa.Column("timezone", sa.String(length=64)),
        sa.Column("parallel_slots", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("slot_interval_minutes", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("min_booking_notice_hours", sa.Integer(), nullable=False, server_default="2"),
        sa.Column("max_booking_advance_days", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("booking_enabled", sa.Boolean(), server_default=sa.true()),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("deleted_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint("parallel_slots >= 1", name="ck_location_parallel_slots_positive"),
        sa.CheckConstraint("slot_interval_minutes > 0", name="ck_location_slot_interval_positive"),
    )
    op.create_index("ix_locations_network_id", "locations", ["network_id"])

    day_of_week = postgresql.ENUM(*DAYS, name="dayofweek", create_type=False)
    day_of_week.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "location_opening_hours",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("location_id", sa.Integer(), sa.ForeignKey("locations.id", ondelete="CASCADE")),
        sa.Column("day_of_week", day_of_week, nullable=False),
        sa.Column("open_time", sa.String(length=5), nullable=False, server_default="08:00"),
        sa.Column("close_time", sa.String(length=5), nullable=False, server_default="18:00"),
        sa.Column("is_closed", sa.Boolean(), server_default=sa.false()),
        sa.UniqueConstraint("location_id", "day_of_week", name="uq_opening_hours_location_day"),
    )

    op.create_table(
        "service_packages",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("network_id", sa.Integer(), sa.ForeignKey("networks.id", ondelete="CASCADE")),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("code", sa.String(length=32)),
    )
    op.create_index("ix_service_packages_network_id", "service_packages", ["network_id"])

    op.create_table(
        "service_prices",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("network_id", sa.Integer(), sa.ForeignKey("networks.id", ondelete="CASCADE")),
        sa.Column(
            "service_package_id",
            sa.Integer(),
            sa.ForeignKey("service_packages.id", ondelete="CASCADE"),
        ),
        sa.Column("vehicle_type", sa.String(length=32), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="HUF"),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.CheckConstraint("duration_minutes > 0", name="ck_service_price_duration_positive"),
    )
    op.create_index("ix_service_prices_network_id", "service_prices", ["network_id"])

    booking_status = postgresql.ENUM(
        "PENDING",
        "CONFIRMED",
        "IN_PROGRESS",
        "COMPLETED",
        "CANCELLED",
        "NO_SHOW",
        name="bookingstatus",
        create_type=False,
    )
    booking_status.create(op.get_bind(), checkfirst=True)
    payment_status = postgresql.ENUM(
        "PENDING", "PAID", "REFUNDED", "FAILED", name="paymentstatus", create_type=False
    )
    payment_status.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("booking_code", sa.String(length=8), nullable=False),
        sa.Column("network_id", sa.Integer(), sa.ForeignKey("networks.id", ondelete="CASCADE")),
        sa.Column("location_id", sa.Integer(), sa.ForeignKey("locations.id", ondelete="CASCADE")),
        sa.Column("driver_id", sa.Integer()),
        sa.Column("service_offering_id", sa.Integer(), sa.ForeignKey("service_prices.id")),
        sa.Column("service_package_id", sa.Integer(), sa.ForeignKey("service_packages.id")),
        sa.Column("vehicle_type", sa.String(length=32), nullable=False),
        sa.Column("plate_number", sa.String(length=16)),
        sa.Column("scheduled_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("scheduled_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", booking_status, server_default="PENDING"),
        sa.Column("payment_status", payment_status, server_default="PENDING"),
        sa.Column("payment_provider", sa.String(length=32)),
        sa.Column("service_duration_minutes", sa.Integer(), nullable=False),
        sa.Column("service_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("customer_name", sa.String(length=255)),
        sa.Column("customer_phone", sa.String(length=32)),
        sa.Column("customer_email", sa.String(length=255)),
        sa.Column("notes", sa.Text()),
        sa.Column("created_by_type", sa.String(length=32)),
        sa.Column("created_by_id", sa.String(length=64)),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        sa.Column("cancelled_by", sa.String(length=64)),
        sa.Column("cancellation_reason", sa.String(length=255)),
        sa.Column("cancellation_fee_applied", sa.Numeric(10, 2)),
        sa.Column("wash_event_id", sa.String(length=64)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("booking_code", name="uq_booking_code"),
        sa.CheckConstraint("scheduled_end > scheduled_start", name="ck_booking_interval"),
    )
    op.create_index("ix_bookings_network_id", "bookings", ["network_id"])
    op.create_index("ix_bookings_status", "bookings", ["status"])
    op.create_index(
        "ix_booking_location_window",
        "bookings",
        ["location_id", "scheduled_start", "scheduled_end"],
    )

    op.create_table(
        "blocked_time_slots",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("network_id", sa.Integer(), sa.ForeignKey("networks.id", ondelete="CASCADE")),
        sa.Column("location_id", sa.Integer(), sa.ForeignKey("locations.id", ondelete="CASCADE")),
        sa.Column("start_time", sa.DateTime(timezone=True)),
        sa.Column("end_time", sa.DateTime(timezone=True)),
        sa.Column("is_recurring", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("recurring_day_of_week", day_of_week),
        sa.Column("recurring_start_time", sa.String(length=5)),
        sa.Column("recurring_end_time", sa.String(length=5)),
        sa.Column("reason", sa.String(length=255)),
        sa.Column("created_by", sa.String(length=64)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "(NOT is_recurring AND start_time IS NOT NULL AND end_time IS NOT NULL"
            " AND recurring_day_of_week IS NULL AND recurring_start_time IS NULL"
            " AND recurring_end_time IS NULL)"
            " OR (is_recurring AND start_time IS NULL AND end_time IS NULL"
            " AND recurring_day_of_week IS NOT NULL AND recurring_start_time IS NOT NULL"
            " AND recurring_end_time IS NOT NULL)",
            name="ck_blocked_time_slot_shape",
        ),
    )
    op.create_index("ix_blocked_time_slots_network_id", "blocked_time_slots", ["network_id"])
    op.create_index("ix_blocked_time_slots_location_id", "blocked_time_slots", ["location_id"])

    op.create_table(
        "booking_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "network_id",
            sa.Integer(),
            sa.ForeignKey("networks.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("cancellation_deadline_hours", sa.Integer(), nullable=False, server_default="24"),
        sa.Column("cancellation_fee_percent", sa.Numeric(5, 2), nullable=False, server_default="50"),
        sa.Column("no_show_fee_percent", sa.Numeric(5, 2), nullable=False, server_default="100"),
        sa.Column("reminder_enabled", sa.Boolean(), server_default=sa.true()),
        sa.Column("reminder_hours_before", sa.JSON()),
        sa.Column("require_prepayment_online", sa.Boolean(), server_default=sa.false()),
        sa.Column("allow_pay_on_site_cash", sa.Boolean(), server_default=sa.true()),
        sa.Column("allow_pay_on_site_card", sa.Boolean(), server_default=sa.true()),
        sa.Column("allow_online_card", sa.Boolean(), server_default=sa.true()),
        sa.Column("allow_apple_pay", sa.Boolean(), server_default=sa.false()),
        sa.Column("allow_google_pay", sa.Boolean(), server_default=sa.false()),
        sa.Column("cancellation_policy_text", sa.Text()),
        sa.Column("confirmation_message", sa.Text()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    actor_type = postgresql.ENUM(
        "driver",
        "operator",
        "network_admin",
        "public",
        "system",
        name="actortype",
        create_type=False,
    )
    actor_type.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("network_id", sa.Integer()),
        sa.Column("actor_type", actor_type),
        sa.Column("actor_id", sa.String(length=64)),
        sa.Column("action", sa.String(length=255)),
        sa.Column("payload", sa.JSON()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_audit_logs_network_id", "audit_logs", ["network_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_logs_network_id", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_table("booking_settings")
    op.drop_index("ix_blocked_time_slots_location_id", table_name="blocked_time_slots")
    op.drop_index("ix_blocked_time_slots_network_id", table_name="blocked_time_slots")
    op.drop_table("blocked_time_slots")
    op.drop_index("ix_booking_location_window", table_name="bookings")
    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_network_id", table_name="bookings")
    op.drop_table("bookings")
    op.drop_index("ix_service_prices_network_id", table_name="service_prices")
    op.drop_table("service_prices")
    op.drop_index("ix_service_packages_network_id", table_name="service_packages")
    op.drop_table("service_packages")
    op.drop_table("location_opening_hours")
    op.drop_index("ix_locations_network_id", table_name="locations")
    op.drop_table("locations")
    op.drop_table("networks")
    for enum_name in ("actortype", "paymentstatus", "bookingstatus", "dayofweek"):
        postgresql.ENUM(name=enum_name).drop(op.get_bind(), checkfirst=True)
