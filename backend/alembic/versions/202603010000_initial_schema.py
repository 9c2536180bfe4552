"""Initial civil defence schema

Revision ID: 202603010000
Revises:
Create Date: 2026-03-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '202603010000'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # ------------------------------
    # users
    # ------------------------------
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('profile_image_url', sa.String(500), nullable=True),
        sa.Column('role', sa.String(50), nullable=False, server_default='volunteer'),
        sa.Column('district', sa.String(100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('failed_attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_locked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('token_version', sa.Integer(), nullable=False, server_default='1'),
        *_timestamps(),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_district', 'users', ['district'])
    op.create_index('ix_users_role', 'users', ['role'])

    # ------------------------------
    # volunteers
    # ------------------------------
    op.create_table(
        'volunteers',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('full_name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('district', sa.String(100), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('is_ex_serviceman', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('service_history', sa.Text(), nullable=True),
        sa.Column('skills', sa.JSON(), nullable=False),
        sa.Column('qualifications', sa.Text(), nullable=True),
        sa.Column('medical_history', sa.Text(), nullable=True),
        sa.Column('emergency_contact', sa.String(200), nullable=True),
        sa.Column('emergency_phone', sa.String(20), nullable=True),
        sa.Column('id_proof_url', sa.String(500), nullable=True),
        sa.Column('certificate_url', sa.String(500), nullable=True),
        sa.Column('photo_url', sa.String(500), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('approved_by', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('user_id', name='uq_volunteers_user_id'),
    )
    op.create_index('ix_volunteers_district', 'volunteers', ['district'])
    op.create_index('ix_volunteers_status', 'volunteers', ['status'])

    # ------------------------------
    # incidents
    # ------------------------------
    op.create_table(
        'incidents',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('reported_by', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('location', sa.String(500), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('district', sa.String(100), nullable=False),
        sa.Column('severity', sa.String(20), nullable=False, server_default='medium'),
        sa.Column('status', sa.String(20), nullable=False, server_default='reported'),
        sa.Column('assigned_to', sa.JSON(), nullable=False),
        sa.Column('resolved_by', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_incidents_reported_by', 'incidents', ['reported_by'])
    op.create_index('ix_incidents_district', 'incidents', ['district'])
    op.create_index('ix_incidents_status', 'incidents', ['status'])
    op.create_index('ix_incidents_severity', 'incidents', ['severity'])

    # ------------------------------
    # inventory
    # ------------------------------
    op.create_table(
        'inventory',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('condition', sa.String(20), nullable=False, server_default='good'),
        sa.Column('location', sa.String(500), nullable=False),
        sa.Column('district', sa.String(100), nullable=False),
        sa.Column('last_inspection', sa.Date(), nullable=True),
        sa.Column('next_inspection', sa.Date(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('quantity >= 0', name='ck_inventory_quantity_non_negative'),
    )
    op.create_index('ix_inventory_district', 'inventory', ['district'])
    op.create_index('ix_inventory_category', 'inventory', ['category'])

    # ------------------------------
    # trainings / registrations
    # ------------------------------
    op.create_table(
        'trainings',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('district', sa.String(100), nullable=False),
        sa.Column('location', sa.String(500), nullable=False),
        sa.Column('start_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('skills', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='upcoming'),
        sa.Column('is_statewide', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_by', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('capacity >= 1', name='ck_trainings_capacity_positive'),
    )
    op.create_index('ix_trainings_district', 'trainings', ['district'])

    op.create_table(
        'training_registrations',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('training_id', sa.Uuid(), sa.ForeignKey('trainings.id', ondelete='CASCADE'), nullable=False),
        sa.Column('volunteer_id', sa.Uuid(), sa.ForeignKey('volunteers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('attended', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('training_id', 'volunteer_id', name='uq_training_registration'),
    )
    op.create_index('ix_training_registrations_training_id', 'training_registrations', ['training_id'])
    op.create_index('ix_training_registrations_volunteer_id', 'training_registrations', ['volunteer_id'])

    # ------------------------------
    # assignments
    # ------------------------------
    op.create_table(
        'assignments',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('volunteer_id', sa.Uuid(), sa.ForeignKey('volunteers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('incident_id', sa.Uuid(), sa.ForeignKey('incidents.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', sa.String(100), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='assigned'),
        sa.Column('assigned_by', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('assigned_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_assignments_volunteer_id', 'assignments', ['volunteer_id'])
    op.create_index('ix_assignments_incident_id', 'assignments', ['incident_id'])

    # ------------------------------
    # CMS content
    # ------------------------------
    op.create_table(
        'cms_translations',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('key', sa.String(255), nullable=False),
        sa.Column('language', sa.String(10), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('category', sa.String(100), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('key', 'language', name='uq_cms_translations_key_language'),
    )
    op.create_index('ix_cms_translations_key', 'cms_translations', ['key'])

    op.create_table(
        'cms_hero_banners',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('title_en', sa.String(255), nullable=False),
        sa.Column('title_or', sa.String(255), nullable=False),
        sa.Column('subtitle_en', sa.Text(), nullable=False),
        sa.Column('subtitle_or', sa.Text(), nullable=False),
        sa.Column('image_url', sa.String(500), nullable=False),
        sa.Column('button_text_en', sa.String(100), nullable=True),
        sa.Column('button_text_or', sa.String(100), nullable=True),
        sa.Column('button_link', sa.String(500), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        'cms_about_content',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('section', sa.String(100), nullable=False),
        sa.Column('title_en', sa.String(255), nullable=False),
        sa.Column('title_or', sa.String(255), nullable=False),
        sa.Column('content_en', sa.Text(), nullable=False),
        sa.Column('content_or', sa.Text(), nullable=False),
        sa.Column('icon_name', sa.String(100), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        'cms_services',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('title_en', sa.String(255), nullable=False),
        sa.Column('title_or', sa.String(255), nullable=False),
        sa.Column('description_en', sa.Text(), nullable=False),
        sa.Column('description_or', sa.Text(), nullable=False),
        sa.Column('icon_name', sa.String(100), nullable=False),
        sa.Column('color', sa.String(50), nullable=False, server_default='text-primary'),
        sa.Column('bg_color', sa.String(50), nullable=False, server_default='bg-primary/10'),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        'cms_site_settings',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('key', sa.String(255), nullable=False),
        sa.Column('value', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('key', name='uq_cms_site_settings_key'),
    )


def downgrade() -> None:
    op.drop_table('cms_site_settings')
    op.drop_table('cms_services')
    op.drop_table('cms_about_content')
    op.drop_table('cms_hero_banners')
    op.drop_index('ix_cms_translations_key', table_name='cms_translations')
    op.drop_table('cms_translations')
    op.drop_table('assignments')
    op.drop_table('training_registrations')
    op.drop_table('trainings')
    op.drop_table('inventory')
    op.drop_table('incidents')
    op.drop_table('volunteers')
    op.drop_table('users')
