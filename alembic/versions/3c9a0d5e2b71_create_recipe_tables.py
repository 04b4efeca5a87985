"""create recipe tables

Revision ID: 3c9a0d5e2b71
Revises:
Create Date: 2025-08-17 07:39:54.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c9a0d5e2b71'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create ingredients, recipes, steps and step_ingredients."""
    op.create_table(
        'ingredients',
        sa.Column('ing_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('ingr_name', sa.String(), nullable=False),
        sa.Column('unit', sa.String(), nullable=False),
        sa.PrimaryKeyConstraint('ing_id'),
    )
    op.create_table(
        'recipes',
        sa.Column('recipe_id', sa.String(length=21), nullable=False),
        sa.Column('recipe_name', sa.String(length=128), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('recipe_id'),
    )
    op.create_index(
        'ix_recipes_recipe_name_lower', 'recipes', [sa.text('lower(recipe_name)')], unique=True
    )
    op.create_table(
        'steps',
        sa.Column('step_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('step_number', sa.Integer(), nullable=False),
        sa.Column('step_instructions', sa.String(), nullable=False),
        sa.Column('recipe_id', sa.String(length=21), nullable=False),
        sa.ForeignKeyConstraint(['recipe_id'], ['recipes.recipe_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('step_id'),
    )
    op.create_index(op.f('ix_steps_recipe_id'), 'steps', ['recipe_id'], unique=False)
    op.create_table(
        'step_ingredients',
        sa.Column('step_id', sa.Integer(), nullable=False),
        sa.Column('ing_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.ForeignKeyConstraint(['ing_id'], ['ingredients.ing_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['step_id'], ['steps.step_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('step_id', 'ing_id'),
    )
    op.create_index(op.f('ix_step_ingredients_ing_id'), 'step_ingredients', ['ing_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_step_ingredients_ing_id'), table_name='step_ingredients')
    op.drop_table('step_ingredients')
    op.drop_index(op.f('ix_steps_recipe_id'), table_name='steps')
    op.drop_table('steps')
    op.drop_index('ix_recipes_recipe_name_lower', table_name='recipes')
    op.drop_table('recipes')
    op.drop_table('ingredients')
