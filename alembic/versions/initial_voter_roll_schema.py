"""initial voter roll schema

Revision ID: voter_roll_001
Revises:
Create Date: 2025-01-10 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'voter_roll_001'
down_revision = None
branch_labels = None
depends_on = None

VOTER_TABLES = [
    'voters',
    'voters_ac210',
    'voters_ac211',
    'voters_ac212',
    'voters_ac224',
    'voters_ac225',
    'voters_ac226',
    'voters_ac227',
]

LEGACY_PART_TABLES = ['legacyparts', 'legacyparts_2025']


def upgrade():
    op.create_table(
        'api_keys',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('key_hash', sa.String(), nullable=False),
        sa.Column('key_prefix', sa.String(length=16), nullable=False),
        sa.Column('status', sa.Enum('ACTIVE', 'REVOKED', name='apikeystatus'), nullable=False),
        sa.Column('whitelist_urls', sa.JSON(), nullable=True),
        sa.Column('encrypted_key', sa.String(), nullable=True),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_api_keys_key_hash', 'api_keys', ['key_hash'], unique=True)

    # One table per constituency partition, all with the same roll layout
    for table in VOTER_TABLES:
        op.create_table(
            table,
            sa.Column('id', sa.String(), primary_key=True),
            sa.Column('acNo', sa.Integer(), nullable=False),
            sa.Column('partNo', sa.Integer(), nullable=False),
            sa.Column('slNoInPart', sa.Integer(), nullable=False),
            sa.Column('houseNo', sa.String(), nullable=True),
            sa.Column('sectionNo', sa.String(), nullable=True),
            sa.Column('fmNameV2', sa.String(), nullable=True),
            sa.Column('rlnFmNmV2', sa.String(), nullable=True),
            sa.Column('rlnType', sa.String(), nullable=True),
            sa.Column('age', sa.Integer(), nullable=True),
            sa.Column('sex', sa.String(), nullable=True),
            sa.Column('idCardNo', sa.String(), nullable=True),
            sa.Column('psName', sa.String(), nullable=True),
            sa.UniqueConstraint('acNo', 'partNo', 'slNoInPart', name=f'uq_{table}_roll_position'),
        )
        op.create_index(f'ix_{table}_part_serial', table, ['partNo', 'slNoInPart'])
        op.create_index(f'ix_{table}_idCardNo', table, ['idCardNo'])

    for table in LEGACY_PART_TABLES:
        op.create_table(
            table,
            sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column('acNo', sa.Integer(), nullable=False),
            sa.Column('partNo', sa.Integer(), nullable=False),
            sa.Column('partNameV1', sa.String(), nullable=True),
            sa.Column('partNameTn', sa.String(), nullable=True),
            sa.Column('localityV1', sa.String(), nullable=True),
            sa.Column('localityTn', sa.String(), nullable=True),
        )
        op.create_index(f'ix_{table}_ac_part', table, ['acNo', 'partNo'])


def downgrade():
    for table in LEGACY_PART_TABLES:
        op.drop_index(f'ix_{table}_ac_part', table_name=table)
        op.drop_table(table)

    for table in VOTER_TABLES:
        op.drop_index(f'ix_{table}_idCardNo', table_name=table)
        op.drop_index(f'ix_{table}_part_serial', table_name=table)
        op.drop_table(table)

    op.drop_index('ix_api_keys_key_hash', table_name='api_keys')
    op.drop_table('api_keys')
    sa.Enum(name='apikeystatus').drop(op.get_bind(), checkfirst=True)
