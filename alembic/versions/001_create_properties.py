from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_create_properties'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('username', sa.String(100), nullable=False, unique=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password', sa.String(255), nullable=False),
        sa.Column('profile_img', sa.String(500)),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )
    op.create_table(
        'properties',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('current_owner_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('type', sa.Enum('beach', 'mountain', 'village', name='property_type'), nullable=False),
        sa.Column('desc', sa.Text),
        sa.Column('img', sa.String(500)),
        sa.Column('price', sa.Float),
        sa.Column('sqmeters', sa.Integer),
        sa.Column('continent', sa.String(50)),
        sa.Column('beds', sa.Integer),
        sa.Column('featured', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('extras', sa.JSON, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )
    op.create_index('ix_properties_current_owner_id', 'properties', ['current_owner_id'])
    op.create_index('ix_properties_type', 'properties', ['type'])
    op.create_table(
        'property_bookmarks',
        sa.Column('property_id', sa.Uuid(as_uuid=True), sa.ForeignKey('properties.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )
    op.create_index('ix_property_bookmarks_user_id', 'property_bookmarks', ['user_id'])


def downgrade():
    op.drop_table('property_bookmarks')
    op.drop_table('properties')
    sa.Enum(name='property_type').drop(op.get_bind(), checkfirst=True)
    op.drop_table('users')
