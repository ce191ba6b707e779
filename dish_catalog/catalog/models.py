from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Diet = Literal["vegetarian", "non-vegetarian"]
Course = Literal["main course", "dessert", "snack", "starter"]
FlavorProfile = Literal["sweet", "spicy", "bitter", "sour"]
Region = Literal["North", "South", "East", "West", "North East", "Central"]

DIETS: list[str] = ["vegetarian", "non-vegetarian"]
COURSES: list[str] = ["main course", "dessert", "snack", "starter"]
FLAVOR_PROFILES: list[str] = ["sweet", "spicy", "bitter", "sour"]
REGIONS: list[str] = ["North", "South", "East", "West", "North East", "Central"]

DISH_FIELDS: list[str] = [
    "id",
    "name",
    "ingredients",
    "diet",
    "prep_time",
    "cook_time",
    "flavor_profile",
    "course",
    "state",
    "region",
]

# Fields a listing may be sorted by (everything scalar)
SORTABLE_FIELDS: list[str] = [f for f in DISH_FIELDS if f != "ingredients"]


class Dish(BaseModel):
    id: str
    name: str = Field(..., min_length=1)
    ingredients: list[str] = Field(default_factory=list)
    diet: Diet
    prep_time: Optional[int] = Field(default=None, ge=0)
    cook_time: Optional[int] = Field(default=None, ge=0)
    flavor_profile: Optional[FlavorProfile] = None
    course: Course
    state: Optional[str] = None
    region: Optional[Region] = None


class MatchResult(Dish):
    """A dish scored against a pantry."""

    model_config = ConfigDict(populate_by_name=True)

    matched_ingredients_count: int = Field(..., alias="matchedIngredientsCount")
    total_ingredients_count: int = Field(..., alias="totalIngredientsCount")
    match_percentage: int = Field(..., ge=0, le=100, alias="matchPercentage")
    missing_ingredients: list[str] = Field(
        default_factory=list, alias="missingIngredients"
    )


class IngredientsRequest(BaseModel):
    ingredients: list[str] = Field(
        ..., description='Ingredients available in the pantry, e.g. ["rice", "salt"]'
    )


class DishListQuery(BaseModel):
    """Decoded and validated query parameters of the listing endpoint."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)
    sort_by: str = "name"
    order: Literal["asc", "desc"] = "asc"
    diet: Optional[Diet] = None
    course: Optional[list[str]] = None
    flavor_profile: Optional[list[str]] = None


class DishListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    count: int
    total: int
    total_pages: int = Field(..., alias="totalPages")
    current_page: int = Field(..., alias="currentPage")
    data: list[Dish]


class DishSearchResponse(BaseModel):
    success: bool = True
    count: int
    data: list[Dish]


class MatchResponse(BaseModel):
    success: bool = True
    count: int
    data: list[MatchResult]


class IngredientListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[str]


class FilterOptions(BaseModel):
    diets: list[str]
    courses: list[str]
    flavor_profiles: list[str]


class FilterOptionsResponse(BaseModel):
    success: bool = True
    data: FilterOptions
