import logging
from sqlalchemy.orm import Session

from app import crud, models, schemas
from app.db.session import Base, SessionLocal, engine, transaction

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SAMPLE_INGREDIENTS = [
    ("Spaghetti", "g"),
    ("Eggs", ""),
    ("Parmesan cheese", "g"),
    ("Pancetta", "g"),
    ("Black pepper", "g"),
    ("Salt", "g"),
]

SAMPLE_RECIPE_NAME = "Spaghetti Carbonara"

# (step_number, instructions, [(ingredient name, quantity)])
SAMPLE_STEPS = [
    (1, "Boil water in a large pot.", []),
    (2, "Add spaghetti and cook until al dente.", [("Spaghetti", 500)]),
    (3, "In a bowl, whisk eggs and mix with grated Parmesan cheese.", [("Eggs", 4), ("Parmesan cheese", 100)]),
    (4, "Fry pancetta in a pan until crispy.", [("Pancetta", 200)]),
    (5, "Drain spaghetti and add to the pancetta pan.", [("Spaghetti", 500)]),
    (6, "Remove from heat and quickly mix in the egg mixture.", [("Eggs", 4), ("Parmesan cheese", 100)]),
    (7, "Season with black pepper and serve immediately.", [("Black pepper", 10)]),
]


def init_db(db: Session) -> None:
    if db.query(models.Ingredient).count():
        logger.info("Ingredient catalog already populated.")
    else:
        logger.info(f"Adding {len(SAMPLE_INGREDIENTS)} ingredients to the catalog...")
        with transaction(db):
            for name, unit in SAMPLE_INGREDIENTS:
                db.add(models.Ingredient(ingr_name=name, unit=unit))

    if crud.recipe_name_exists(db, SAMPLE_RECIPE_NAME):
        logger.info(f"Recipe '{SAMPLE_RECIPE_NAME}' already exists.")
        return

    ingredient_ids = {i.ingr_name: i.ing_id for i in crud.get_ingredients(db)}
    steps = [
        schemas.StepCreate(
            step_number=number,
            step_instructions=instructions,
            ingredients=[
                schemas.IngredientLineCreate(ingredient_id=ingredient_ids[name], quantity=quantity)
                for name, quantity in lines
                if name in ingredient_ids
            ] or None,
        )
        for number, instructions, lines in SAMPLE_STEPS
    ]
    logger.info(f"Creating recipe '{SAMPLE_RECIPE_NAME}'...")
    crud.create_recipe(db, schemas.RecipeCreate(recipe_name=SAMPLE_RECIPE_NAME, steps=steps))
    logger.info("Sample data created successfully.")


def main() -> None:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        init_db(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
