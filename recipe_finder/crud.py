import json
from typing import List, Set

from sqlalchemy.orm import Session

from . import models, schemas


def get_favorite(db: Session, recipe_id: int):
    return (
        db.query(models.Favorite)
        .filter(models.Favorite.recipe_id == recipe_id)
        .first()
    )


def get_favorites(db: Session) -> List[schemas.Recipe]:
    rows = db.query(models.Favorite).order_by(models.Favorite.created_at, models.Favorite.recipe_id).all()
    return [schemas.Recipe.model_validate(json.loads(r.snapshot)) for r in rows]


def favorite_ids(db: Session) -> Set[int]:
    return {rid for (rid,) in db.query(models.Favorite.recipe_id).all()}


def add_favorite(db: Session, recipe: schemas.Recipe):
    db_fav = get_favorite(db, recipe.id)
    if db_fav:
        return db_fav
    db_fav = models.Favorite(
        recipe_id=recipe.id,
        name=recipe.name,
        snapshot=recipe.model_dump_json(),
    )
    db.add(db_fav)
    db.commit()
    db.refresh(db_fav)
    return db_fav


def remove_favorite(db: Session, recipe_id: int) -> bool:
    db_fav = get_favorite(db, recipe_id)
    if not db_fav:
        return False
    db.delete(db_fav)
    db.commit()
    return True
