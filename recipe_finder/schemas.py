from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

Difficulty = Literal["easy", "medium", "hard"]
MatchMode = Literal["exact", "contains"]


class Nutrition(BaseModel):
    model_config = ConfigDict(frozen=True)

    calories: float = Field(0, ge=0)
    protein: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)


class RecipeBase(BaseModel):
    name: str = Field(
        ..., min_length=1, json_schema_extra={"example": "Chicken Fried Rice"}
    )
    steps: List[str] = Field(
        default_factory=list,
        json_schema_extra={
            "example": [
                "Cook the rice",
                "Fry chicken and onion",
                "Toss everything together",
            ]
        },
    )
    time: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=1)
    difficulty: Optional[Difficulty] = None
    dietary: List[str] = Field(default_factory=list)
    nutrition: Nutrition = Field(default_factory=Nutrition)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _lower_difficulty(cls, v):
        if isinstance(v, str):
            return v.strip().lower() or None
        return v

    @field_validator("dietary", mode="before")
    @classmethod
    def _lower_dietary(cls, v):
        if v is None:
            return []
        if isinstance(v, list):
            return [t.strip().lower() for t in v if isinstance(t, str) and t.strip()]
        return v


class RawRecipe(RecipeBase):
    """One record of the catalog file, before indexing."""

    model_config = ConfigDict(extra="ignore")

    id: int
    ingredients: List[str] = Field(
        ..., min_length=1,
        json_schema_extra={"example": ["2 cups cooked rice", "1 chicken breast"]},
    )

    @field_validator("id", mode="before")
    @classmethod
    def _reject_bool_id(cls, v):
        # bool is an int subclass; true/false is not a recipe id
        if isinstance(v, bool):
            raise ValueError("id must be a number")
        return v


class Recipe(RecipeBase):
    model_config = ConfigDict(frozen=True)

    id: int
    ingredients: List[str] = Field(..., min_length=1)
    image: str


class MatchResult(BaseModel):
    recipe: Recipe
    matched: int
    accuracy: float = Field(..., ge=0, le=100)
    favorite: bool = False


class Detection(BaseModel):
    name: str
    confidence: float
    label: str
    mapped: bool = False


class MatchRequest(BaseModel):
    ingredients: List[str] = Field(
        default_factory=list, json_schema_extra={"example": ["chicken", "rice"]}
    )
    dietary: List[str] = Field(default_factory=list)
    mode: Optional[MatchMode] = None
    ranked: StrictBool = False


class LabelsRequest(BaseModel):
    labels: List[str] = Field(default_factory=list)


class LabelMapping(BaseModel):
    label: str
    ingredient: str
    mapped: bool


class RecognizeRequest(BaseModel):
    image: str = Field(..., min_length=1)
    min_confidence: Optional[float] = Field(None, ge=0, le=1)


class RecipePage(BaseModel):
    items: List[Recipe]
    total: int
    page: int
    page_size: int
