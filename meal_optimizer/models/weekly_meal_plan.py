from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Weekday = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

MEAL_TYPES: List[str] = ["breakfast", "lunch", "dinner"]


class MealPreferences(BaseModel):
    """Per-request preference overrides, merged over the saved ones"""
    model_config = ConfigDict(extra="allow")

    cuisines: List[str] = Field(default_factory=list)
    goals: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    dietaryRestrictions: List[str] = Field(default_factory=list)


# ---------- upstream (AI agent) contract ----------
class UpstreamMeal(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    ingredients: List[Any] = Field(default_factory=list)
    youtube_link: Optional[str] = None
    image_url: Optional[str] = None
    image: Optional[str] = None
    cookTime: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
            "ingredients": list(self.ingredients),
            "youtube_link": self.youtube_link,
            "image_url": self.image_url or self.image,
            "cook_time": self.cookTime,
            "is_completed": False,
        }


class UpstreamDay(BaseModel):
    model_config = ConfigDict(extra="ignore")

    day: Weekday
    breakfast: Optional[UpstreamMeal] = None
    lunch: Optional[UpstreamMeal] = None
    dinner: Optional[UpstreamMeal] = None

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {"day": self.day}
        for meal_type in MEAL_TYPES:
            meal = getattr(self, meal_type)
            if meal is not None:
                doc[meal_type] = meal.to_document()
        return doc


class UpstreamPlanOption(BaseModel):
    model_config = ConfigDict(extra="ignore")

    option_name: str = "Weekly Meal Plan"
    days: List[UpstreamDay] = Field(default_factory=list)

    @field_validator("days")
    @classmethod
    def _unique_days(cls, days: List[UpstreamDay]) -> List[UpstreamDay]:
        names = [d.day for d in days]
        if len(names) != len(set(names)):
            raise ValueError("duplicate day names in plan option")
        return days


class UpstreamPlanResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    meal_plans: List[UpstreamPlanOption] = Field(min_length=1)

    def first_usable_option(self) -> Optional[UpstreamPlanOption]:
        for option in self.meal_plans:
            if option.days:
                return option
        return None


# ---------- API request bodies ----------
class GenerateWeeklyPlanRequest(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    preferences: Optional[MealPreferences] = None
    force_regenerate: bool = False


class MealCompletionRequest(BaseModel):
    day: Optional[Weekday] = None
    meal_type: str
    is_completed: Optional[bool] = None


class PlanFeedback(BaseModel):
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=1000)
    would_recommend: Optional[bool] = None

    @field_validator("comment")
    @classmethod
    def _strip_comment(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if value is not None else value


class RecipeSearchRequest(BaseModel):
    dietary: Optional[List[str]] = None
    cuisines: Optional[List[str]] = None
    allergies: Optional[List[str]] = None
    max_budget: Optional[float] = Field(default=None, ge=0)
    limit: Optional[int] = Field(default=None, ge=1, le=100)
