"""initial_sync_tables

Revision ID: 001
Revises:
Create Date: 2026-10-18 11:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _synced_columns() -> list:
    """Columnas comunes a toda tabla sincronizada desde Airtable."""
    return [
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('cio_company_id', sa.Integer(), nullable=False),
        sa.Column('airtable_record_id', sa.String(length=64), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def _barcode_columns() -> list:
    return [
        sa.Column('barcode', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('barcode_png', sa.String(length=1024), nullable=False, server_default=''),
        sa.Column('barcode_svg', sa.String(length=1024), nullable=False, server_default=''),
        sa.Column('barcode_pdf_label', sa.String(length=1024), nullable=False, server_default=''),
    ]


def _text(name: str, length: int = 255) -> sa.Column:
    return sa.Column(name, sa.String(length=length), nullable=False, server_default='')


def _create_synced_table(name: str, key: str, constraint: str, *columns: sa.Column) -> None:
    op.create_table(
        name,
        *_synced_columns(),
        *columns,
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('cio_company_id', key, name=constraint),
    )
    op.create_index(op.f(f'ix_{name}_id'), name, ['id'], unique=False)
    op.create_index(op.f(f'ix_{name}_cio_company_id'), name, ['cio_company_id'], unique=False)


SYNCED_TABLES = (
    'asset_items',
    'swag_items',
    'swag_inventory_items',
    'inbound_shipments',
    'outbound_shipments',
    'software_vendors',
    'buildings',
    'conference_rooms',
)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'companies',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('airtable_api_key', sa.String(length=255), nullable=True),
        sa.Column('airtable_base_id_assets', sa.String(length=64), nullable=True),
        sa.Column('airtable_base_id_swag', sa.String(length=64), nullable=True),
        sa.Column('airtable_base_id_shipments', sa.String(length=64), nullable=True),
        sa.Column('airtable_base_id_finance', sa.String(length=64), nullable=True),
        sa.Column('airtable_base_id_misc', sa.String(length=64), nullable=True),
        sa.Column('google_drive_token', sa.Text(), nullable=True),
        sa.Column('printer_url', sa.String(length=512), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_companies_id'), 'companies', ['id'], unique=False)
    op.create_index(op.f('ix_companies_name'), 'companies', ['name'], unique=True)

    _create_synced_table(
        'asset_items', 'name', 'uq_asset_items_company_name',
        sa.Column('name', sa.String(length=255), nullable=False),
        _text('picture', 1024),
        _text('type'),
        sa.Column('qualities', sa.JSON(), nullable=False),
        _text('status'),
        _text('manufacturer'),
        _text('model_number'),
        _text('serial_number'),
        sa.Column('purchase_price', sa.Float(), nullable=False, server_default='0'),
        _text('current_employee_borrowing'),
        sa.Column('conference_room_using', sa.JSON(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
        *_barcode_columns(),
    )
    _create_synced_table(
        'swag_items', 'name', 'uq_swag_items_company_name',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        _text('type'),
        _text('picture', 1024),
    )
    _create_synced_table(
        'swag_inventory_items', 'name', 'uq_swag_inventory_items_company_name',
        sa.Column('name', sa.String(length=255), nullable=False),
        _text('item'),
        _text('size', 64),
        sa.Column('current_stock', sa.Integer(), nullable=False, server_default='0'),
        *_barcode_columns(),
    )
    _create_synced_table(
        'inbound_shipments', 'tracking_number', 'uq_inbound_shipments_company_tracking',
        sa.Column('tracking_number', sa.String(length=255), nullable=False),
        _text('carrier'),
        _text('tracking_status'),
        _text('name'),
        _text('order_number'),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
    )
    _create_synced_table(
        'outbound_shipments', 'tracking_number', 'uq_outbound_shipments_company_tracking',
        sa.Column('tracking_number', sa.String(length=255), nullable=False),
        _text('carrier'),
        _text('status'),
        _text('name'),
        _text('email'),
        _text('street_1'),
        _text('city'),
        _text('state'),
        _text('zipcode', 32),
        _text('country', 64),
    )
    _create_synced_table(
        'software_vendors', 'name', 'uq_software_vendors_company_name',
        sa.Column('name', sa.String(length=255), nullable=False),
        _text('status'),
        _text('category'),
        _text('website', 1024),
        sa.Column('users', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('cost_per_user_per_month', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_cost_per_month', sa.Float(), nullable=False, server_default='0'),
    )
    _create_synced_table(
        'buildings', 'name', 'uq_buildings_company_name',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        _text('street_address'),
        _text('city'),
        _text('state'),
        _text('zipcode', 32),
        _text('country', 64),
        sa.Column('floors', sa.JSON(), nullable=False),
    )
    _create_synced_table(
        'conference_rooms', 'name', 'uq_conference_rooms_company_name',
        sa.Column('name', sa.String(length=255), nullable=False),
        _text('type'),
        _text('building'),
        _text('floor', 64),
        sa.Column('capacity', sa.Integer(), nullable=False, server_default='0'),
    )


def downgrade() -> None:
    """Downgrade schema."""
    for name in reversed(SYNCED_TABLES):
        op.drop_index(op.f(f'ix_{name}_cio_company_id'), table_name=name)
        op.drop_index(op.f(f'ix_{name}_id'), table_name=name)
        op.drop_table(name)
    op.drop_index(op.f('ix_companies_name'), table_name='companies')
    op.drop_index(op.f('ix_companies_id'), table_name='companies')
    op.drop_table('companies')
