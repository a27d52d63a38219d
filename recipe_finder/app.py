from contextlib import asynccontextmanager
import logging
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from . import crud, schemas
from .catalog import Catalog, index_catalog
from .config import Settings, configure_logging, get_settings
from .db import SessionLocal, init_db
from .errors import (
    EmptySelection,
    InvalidCatalog,
    RecognitionError,
    RecognitionNotConfigured,
    RecognitionRateLimited,
)
from .labels import map_label, suggest_ingredient
from .matching import search
from .normalize import normalize_many
from .recipes import load_recipes
from .recognition import RecognitionClient

log = logging.getLogger(__name__)


def load_catalog(settings: Settings) -> Catalog:
    return index_catalog(load_recipes(settings.catalog_path))


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    init_db()
    app.state.catalog = None
    app.state.catalog_error = None
    try:
        app.state.catalog = load_catalog(settings)
    except InvalidCatalog as e:
        log.error("Could not load recipe catalog: %s", e)
        app.state.catalog_error = str(e)
    app.state.recognition_client = RecognitionClient(settings)
    yield
    app.state.recognition_client.close()


app = FastAPI(title="Recipe Finder", lifespan=lifespan)

# Allow CORS for API clients (adjust origins for production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_catalog(request: Request) -> Catalog:
    state = request.app.state
    catalog = getattr(state, "catalog", None)
    if catalog is None:
        error = getattr(state, "catalog_error", None)
        if error is None:
            # lifespan did not run (e.g. plain TestClient); load on first use
            try:
                catalog = state.catalog = load_catalog(get_settings())
            except InvalidCatalog as e:
                error = state.catalog_error = str(e)
        if catalog is None:
            raise HTTPException(
                status_code=503, detail=f"Could not load recipe database: {error}"
            )
    return catalog


def get_recognition_client(
    request: Request, settings: Settings = Depends(get_settings)
) -> RecognitionClient:
    # shared across requests; holds the auto-created user token
    state = request.app.state
    client = getattr(state, "recognition_client", None)
    if client is None or client.settings is not settings:
        if client is not None:
            client.close()
        client = state.recognition_client = RecognitionClient(settings)
    return client


@app.get("/api/recipes", response_model=schemas.RecipePage)
def list_recipes(
    q: str | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    catalog: Catalog = Depends(get_catalog),
):
    items = list(catalog)
    if q and q.strip():
        needle = q.strip().lower()
        items = [r for r in items if needle in r.name.lower()]
    start = (page - 1) * page_size
    return {
        "items": items[start:start + page_size],
        "total": len(items),
        "page": page,
        "page_size": page_size,
    }


@app.get("/api/recipes/featured", response_model=List[schemas.Recipe])
def featured_recipes(
    count: int | None = Query(None, ge=0, le=50),
    seed: int = 0,
    catalog: Catalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
):
    return catalog.featured(settings.featured_count if count is None else count, seed=seed)


@app.get("/api/recipes/{recipe_id}", response_model=schemas.Recipe)
def get_recipe(recipe_id: int, catalog: Catalog = Depends(get_catalog)):
    recipe = catalog.get(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipe


@app.get("/api/ingredients", response_model=List[str])
def list_ingredients(sort: bool = True, catalog: Catalog = Depends(get_catalog)):
    return list(catalog.sorted_vocabulary if sort else catalog.vocabulary)


@app.get("/api/ingredients/suggest", response_model=List[str])
def suggest_ingredients(
    q: str = "",
    exclude: List[str] = Query([]),
    catalog: Catalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
):
    return catalog.suggest(q, exclude=normalize_many(exclude), limit=settings.suggestion_limit)


@app.post("/api/match")
def match(
    payload: schemas.MatchRequest,
    catalog: Catalog = Depends(get_catalog),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    have = normalize_many(payload.ingredients)
    favorites = crud.favorite_ids(db)
    try:
        results = search(
            catalog,
            have,
            payload.dietary,
            mode=payload.mode or settings.match_mode,
            ranked=payload.ranked,
            threshold=settings.match_threshold,
            is_favorite=favorites.__contains__,
        )
    except EmptySelection:
        raise HTTPException(
            status_code=400,
            detail="Please select at least one ingredient to generate recipes.",
        )
    return {
        "have": have,
        "unknown": [i for i in have if not catalog.is_known(i)],
        "results": [r.model_dump() for r in results],
    }


@app.post("/api/labels/map", response_model=List[schemas.LabelMapping])
def map_labels(payload: schemas.LabelsRequest):
    return [
        {
            "label": label,
            "ingredient": suggest_ingredient(label),
            "mapped": map_label(label) is not None,
        }
        for label in payload.labels
        if label and label.strip()
    ]


@app.get("/api/recognize/config")
def recognize_config(client: RecognitionClient = Depends(get_recognition_client)):
    # never echo the key itself
    return {"configured": client.configured, "auth_mode": client.auth_mode.value}


@app.post("/api/recognize", response_model=List[schemas.Detection])
def recognize(
    payload: schemas.RecognizeRequest,
    client: RecognitionClient = Depends(get_recognition_client),
):
    try:
        return client.detect(payload.image, min_confidence=payload.min_confidence)
    except RecognitionNotConfigured as e:
        raise HTTPException(status_code=503, detail=str(e))
    except RecognitionRateLimited:
        raise HTTPException(
            status_code=429,
            detail="Today's request limit has been reached. Please try again tomorrow.",
        )
    except RecognitionError as e:
        status = 400 if e.status_code == 400 else 502
        raise HTTPException(status_code=status, detail=str(e))


@app.get("/api/favorites", response_model=List[schemas.Recipe])
def list_favorites(db: Session = Depends(get_db)):
    return crud.get_favorites(db)


@app.post("/api/favorites/{recipe_id}", response_model=schemas.Recipe)
def add_favorite(
    recipe_id: int,
    db: Session = Depends(get_db),
    catalog: Catalog = Depends(get_catalog),
):
    recipe = catalog.get(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    crud.add_favorite(db, recipe)
    return recipe


@app.delete("/api/favorites/{recipe_id}")
def delete_favorite(recipe_id: int, db: Session = Depends(get_db)):
    if not crud.remove_favorite(db, recipe_id):
        raise HTTPException(status_code=404, detail="Favorite not found")
    return {"deleted": True}
