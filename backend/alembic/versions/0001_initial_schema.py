"""Initial schema: users, suppliers, item types, shipments and their children.

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

from alembic import op
import sqlalchemy as sa

user_role = sa.Enum("ADMIN", "OPERATOR", "VIEWER", name="user_role")
shipment_status = sa.Enum(
    "CREATED", "IMPORTING_DETAILS_DONE", "CUSTOMS_IN_PROGRESS", "CUSTOMS_RECEIVED",
    name="shipment_status",
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("email", sa.String(255), unique=True),
        sa.Column("first_name", sa.String(255)),
        sa.Column("last_name", sa.String(255)),
        sa.Column("profile_image_url", sa.String(500)),
        sa.Column("role", user_role, nullable=False, server_default="VIEWER"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "suppliers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("contact_info", sa.Text()),
        sa.Column("default_country", sa.String(100)),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_suppliers_name", "suppliers", ["name"])

    op.create_table(
        "item_types",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_item_types_name", "item_types", ["name"])

    op.create_table(
        "shipments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("shipment_name", sa.String(255), nullable=False),
        sa.Column("shipment_number", sa.String(100), nullable=False),
        sa.Column("backend_master_key", sa.String(100), nullable=False, unique=True),
        sa.Column("status", shipment_status, nullable=False, server_default="CREATED"),
        sa.Column("created_by_id", sa.String(255), sa.ForeignKey("users.id")),
        sa.Column("updated_by_id", sa.String(255), sa.ForeignKey("users.id")),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_shipments_shipment_number", "shipments", ["shipment_number"])
    op.create_index("ix_shipments_backend_master_key", "shipments", ["backend_master_key"])
    op.create_index("ix_shipments_status", "shipments", ["status"])
    op.create_index("ix_shipments_created_at", "shipments", ["created_at"])

    op.create_table(
        "shipment_items",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "shipment_id", sa.String(36),
            sa.ForeignKey("shipments.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("supplier_id", sa.String(36), sa.ForeignKey("suppliers.id"), nullable=False),
        sa.Column("item_type_id", sa.String(36), sa.ForeignKey("item_types.id"), nullable=False),
        sa.Column("item_photo_url", sa.Text()),
        sa.Column("ctn", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("pcs_per_ctn", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("cou", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("pri", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("total", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_shipment_items_shipment_id", "shipment_items", ["shipment_id"])
    op.create_index("ix_shipment_items_supplier_id", "shipment_items", ["supplier_id"])
    op.create_index("ix_shipment_items_item_type_id", "shipment_items", ["item_type_id"])

    op.create_table(
        "importing_details",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "shipment_id", sa.String(36),
            sa.ForeignKey("shipments.id", ondelete="CASCADE"), nullable=False, unique=True,
        ),
        sa.Column("total_shipment_price", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("commission_percent", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("commission_amount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("shipment_cost", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("shipment_space_m2", sa.Numeric(18, 3), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        "customs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "shipment_id", sa.String(36),
            sa.ForeignKey("shipments.id", ondelete="CASCADE"), nullable=False, unique=True,
        ),
        sa.Column("bill_date", sa.Date()),
        sa.Column("total_pieces_recorded", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("total_pieces_adjusted", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("loss_or_damage_pieces", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        "customs_per_type",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "customs_id", sa.String(36),
            sa.ForeignKey("customs.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("item_type_id", sa.String(36), sa.ForeignKey("item_types.id"), nullable=False),
        sa.Column("total_pcs_per_type", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("total_ctn_per_type", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("paid_customs", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("takhreg", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint("customs_id", "item_type_id", name="uq_customs_per_type_item_type"),
    )
    op.create_index("ix_customs_per_type_customs_id", "customs_per_type", ["customs_id"])

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("user_name", sa.String(255), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("entity_type", sa.String(50), nullable=False),
        sa.Column("entity_id", sa.String(255)),
        sa.Column("entity_code", sa.String(100)),
        sa.Column("summary", sa.Text()),
        sa.Column("details", sa.JSON()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_activity_logs_user_id", "activity_logs", ["user_id"])
    op.create_index("ix_activity_logs_action", "activity_logs", ["action"])
    op.create_index("ix_activity_logs_entity_type", "activity_logs", ["entity_type"])
    op.create_index("ix_activity_logs_created_at", "activity_logs", ["created_at"])


def downgrade() -> None:
    op.drop_table("activity_logs")
    op.drop_table("customs_per_type")
    op.drop_table("customs")
    op.drop_table("importing_details")
    op.drop_table("shipment_items")
    op.drop_table("shipments")
    op.drop_table("item_types")
    op.drop_table("suppliers")
    op.drop_table("users")
    shipment_status.drop(op.get_bind(), checkfirst=True)
    user_role.drop(op.get_bind(), checkfirst=True)
