"""create transactions, companies and persons tables

Revision ID: 5e1f0c2a9b7d
Revises:
Create Date: 2026-10-17 09:12:44.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '5e1f0c2a9b7d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('transactions',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('transaction_date', sa.TIMESTAMP(timezone=True), nullable=True),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('total_value', sa.String(), nullable=True),
    sa.Column('transaction_type', sa.String(), nullable=True, comment='credit or debit'),
    sa.Column('transaction_source', sa.String(), nullable=True),
    sa.Column('company_cnpj', sa.String(), nullable=True, comment='Raw CNPJ/CPF, possibly anonymized'),
    sa.Column('company_name', sa.String(), nullable=True),
    sa.Column('company_seller_name', sa.String(), nullable=True),
    sa.Column('company_id', sa.UUID(), nullable=True),
    sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default='NOW()', nullable=False),
    sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default='NOW()', nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_transactions_company_cnpj', 'transactions', ['company_cnpj'], unique=False)
    op.create_index('ix_transactions_company_id', 'transactions', ['company_id'], unique=False)

    op.create_table('companies',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('company_cnpj', sa.String(), nullable=False),
    sa.Column('company_name', sa.String(), nullable=False),
    sa.Column('corporate_name', sa.String(), nullable=False, comment='razao social'),
    sa.Column('trade_name', sa.String(), nullable=False, comment='nome fantasia'),
    sa.Column('foundation_date', sa.Date(), nullable=True),
    sa.Column('company_size', sa.String(), nullable=False),
    sa.Column('legal_nature', sa.String(), nullable=False),
    sa.Column('micro_entrepreneur_option', sa.Boolean(), nullable=False),
    sa.Column('simplified_tax_option', sa.Boolean(), nullable=False),
    sa.Column('share_capital', sa.String(), nullable=False),
    sa.Column('company_type', sa.String(), nullable=False, comment='Matriz or Filial'),
    sa.Column('status', sa.String(), nullable=False),
    sa.Column('status_date', sa.Date(), nullable=True),
    sa.Column('contacts', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
    sa.Column('address', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
    sa.Column('activities', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
    sa.Column('corporate_structure', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
    sa.Column('statistics', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
    sa.Column('data_source', sa.String(), nullable=True),
    sa.Column('source_transaction_id', sa.UUID(), nullable=True),
    sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default='NOW()', nullable=False),
    sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default='NOW()', nullable=False),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('company_cnpj')
    )

    op.create_table('persons',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('cpf', sa.String(), nullable=False, comment='Formatted CPF, or the raw string for anonymized CPFs'),
    sa.Column('full_name', sa.String(), nullable=False),
    sa.Column('status', sa.String(), nullable=False, comment='active, inactive, blocked, anonymous'),
    sa.Column('notes', sa.Text(), nullable=True),
    sa.Column('personal_business', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
    sa.Column('data_source', sa.String(), nullable=True),
    sa.Column('source_transaction_id', sa.UUID(), nullable=True),
    sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default='NOW()', nullable=False),
    sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default='NOW()', nullable=False),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('cpf')
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('persons')
    op.drop_table('companies')
    op.drop_index('ix_transactions_company_id', table_name='transactions')
    op.drop_index('ix_transactions_company_cnpj', table_name='transactions')
    op.drop_table('transactions')
