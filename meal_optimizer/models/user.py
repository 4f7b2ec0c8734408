from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

Cuisine = Literal[
    "Mediterranean", "Asian", "Mexican", "Italian", "Indian",
    "Plant-Based", "Keto", "Paleo", "American", "Middle Eastern",
]
Goal = Literal[
    "Lose Weight", "Build Muscle", "Eat More Plants", "Save Time",
    "Try New Foods", "Eat Healthier", "Family Meals", "Meal Prep",
]
Allergy = Literal["Nuts", "Dairy", "Gluten", "Shellfish", "Eggs", "Soy", "Fish", "Sesame", "None"]

DEFAULT_BUDGET = 75
MAX_BUDGET = 10000


class Location(BaseModel):
    city: str = "Unknown"
    state: str = "Unknown"
    country: str = "India"


class LocationUpdate(BaseModel):
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None


class UserPreferences(BaseModel):
    cuisines: List[Cuisine] = Field(default_factory=list)
    goals: List[Goal] = Field(default_factory=list)
    allergies: List[Allergy] = Field(default_factory=list)
    # free text, no fixed vocabulary
    dietaryRestrictions: List[str] = Field(default_factory=list)


class PreferencesUpdate(BaseModel):
    """Partial update merged over the stored preferences"""
    model_config = ConfigDict(extra="forbid")

    cuisines: Optional[List[Cuisine]] = None
    goals: Optional[List[Goal]] = None
    allergies: Optional[List[Allergy]] = None
    dietaryRestrictions: Optional[List[str]] = None


class UserRegistration(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)
    budget: Optional[float] = Field(default=None, ge=0, le=MAX_BUDGET)
    location: Optional[Location] = None
    preferences: Optional[UserPreferences] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters long")
        return value


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    budget: Optional[float] = None
    location: Optional[LocationUpdate] = None


class BudgetUpdate(BaseModel):
    budget: float


class UserResponse(BaseModel):
    """User response model for API"""
    id: str
    name: str
    email: str
    budget: float = DEFAULT_BUDGET
    location: Location = Field(default_factory=Location)
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    is_active: bool = True
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: dict) -> "UserResponse":
        return cls(
            id=str(doc["_id"]),
            name=doc.get("name", ""),
            email=doc.get("email", ""),
            budget=doc.get("budget", DEFAULT_BUDGET),
            location=Location(**(doc.get("location") or {})),
            preferences=UserPreferences(**(doc.get("preferences") or {})),
            is_active=doc.get("is_active", True),
            last_login=doc.get("last_login"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )
