"""initial schema: users, fields, readings, predictions, alerts

Revision ID: 3f9c2a71d0b4
Revises:
Create Date: 2026-10-19 09:12:40.118302

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9c2a71d0b4"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # -----------------------
    # users
    # -----------------------
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("email", sa.String(length=120), nullable=True),
        sa.Column("first_name", sa.String(length=120), nullable=True),
        sa.Column("last_name", sa.String(length=120), nullable=True),
        sa.Column("profile_image_url", sa.String(length=500), nullable=True),
        sa.Column("user_type", sa.String(length=30), nullable=False, server_default="farmer"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("email", name="users_email_key"),
    )

    # -----------------------
    # fields
    # -----------------------
    op.create_table(
        "fields",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column(
            "user_id",
            sa.String(length=64),
            sa.ForeignKey("users.id", name="fk_fields_user", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("latitude", sa.Numeric(10, 8), nullable=False),
        sa.Column("longitude", sa.Numeric(11, 8), nullable=False),
        sa.Column("size", sa.Numeric(10, 2), nullable=True),
        sa.Column("crop_type", sa.String(length=30), nullable=True, server_default="maize"),
        sa.Column("planting_date", sa.DateTime(), nullable=True),
        sa.Column("expected_harvest_date", sa.DateTime(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_fields_user_id", "fields", ["user_id"])
    op.create_index("ix_fields_user_name", "fields", ["user_id", "name"])

    # -----------------------
    # satellite_data
    # -----------------------
    op.create_table(
        "satellite_data",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "field_id",
            sa.String(length=36),
            sa.ForeignKey("fields.id", name="fk_satellite_data_field", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("ndvi", sa.Numeric(5, 3), nullable=True),
        sa.Column("evi", sa.Numeric(5, 3), nullable=True),
        sa.Column("sarvi", sa.Numeric(5, 3), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_satellite_data_field_id", "satellite_data", ["field_id"])
    op.create_index("ix_satellite_data_field_date", "satellite_data", ["field_id", "date"])

    # -----------------------
    # weather_data
    # -----------------------
    op.create_table(
        "weather_data",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "field_id",
            sa.String(length=36),
            sa.ForeignKey("fields.id", name="fk_weather_data_field", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("temperature", sa.Numeric(5, 2), nullable=True),
        sa.Column("humidity", sa.Numeric(5, 2), nullable=True),
        sa.Column("rainfall", sa.Numeric(7, 2), nullable=True),
        sa.Column("wind_speed", sa.Numeric(5, 2), nullable=True),
        sa.Column("condition", sa.String(length=60), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_weather_data_field_id", "weather_data", ["field_id"])
    op.create_index("ix_weather_data_field_date", "weather_data", ["field_id", "date"])

    # -----------------------
    # yield_predictions
    # -----------------------
    op.create_table(
        "yield_predictions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "field_id",
            sa.String(length=36),
            sa.ForeignKey("fields.id", name="fk_yield_predictions_field", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("prediction_date", sa.DateTime(), nullable=False),
        sa.Column("predicted_yield", sa.Numeric(10, 2), nullable=True),
        sa.Column("confidence", sa.Numeric(5, 2), nullable=True),
        sa.Column("model_version", sa.String(length=30), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_yield_predictions_field_id", "yield_predictions", ["field_id"])
    op.create_index(
        "ix_yield_predictions_field_date", "yield_predictions", ["field_id", "prediction_date"]
    )

    # -----------------------
    # alerts
    # -----------------------
    op.create_table(
        "alerts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=64),
            sa.ForeignKey("users.id", name="fk_alerts_user", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "field_id",
            sa.String(length=36),
            sa.ForeignKey("fields.id", name="fk_alerts_field", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("priority", sa.String(length=20), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_alerts_user_id", "alerts", ["user_id"])
    op.create_index("ix_alerts_field_id", "alerts", ["field_id"])
    op.create_index("ix_alerts_user_read", "alerts", ["user_id", "is_read"])


def downgrade():
    op.drop_table("alerts")
    op.drop_table("yield_predictions")
    op.drop_table("weather_data")
    op.drop_table("satellite_data")
    op.drop_table("fields")
    op.drop_table("users")
