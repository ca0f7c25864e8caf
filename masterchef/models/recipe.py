"""Recipe Pydantic models."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Version of the Firestore document shape written by this service.
SCHEMA_VERSION = 1


class GenerateRecipeRequest(BaseModel):
    """Body of the generation endpoints."""

    ingredients: Union[List[str], str, None] = Field(
        None, description="Ingredient list, or one comma-separated string"
    )
    dietaryPreferences: Optional[List[str]] = Field(
        None, description="Optional dietary tags (e.g. 'vegan', 'gluten-free')"
    )
    systemPrompt: Optional[str] = Field(None, description="Replaces the built-in instruction when set")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "ingredients": ["chicken", "garlic", "lemon", "thyme", "potatoes"],
                "dietaryPreferences": ["gluten-free"],
            }
        }
    )


class GenerateRecipeResponse(BaseModel):
    """Generated recipe, raw markdown exactly as the model wrote it."""

    recipe: str


class SaveRecipeRequest(BaseModel):
    """Body for saving a generated recipe."""

    recipe: str = Field(..., description="Recipe markdown body")
    ingredients: List[str] = Field(default_factory=list, description="Ingredients the recipe was generated from")


class SaveRecipeResponse(BaseModel):
    id: str
    title: str


class FavoriteUpdate(BaseModel):
    isFavorite: bool


class NotesUpdate(BaseModel):
    notes: str = ""


class SavedRecipe(BaseModel):
    """A persisted, owner-scoped recipe document."""

    id: str
    userId: str
    createdAt: Optional[datetime] = None
    recipeContent: str = ""
    recipeTitle: str = ""
    ingredientsList: List[str] = Field(default_factory=list)
    isFavorite: bool = False
    userNotes: str = ""
    schemaVersion: int = SCHEMA_VERSION

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "SavedRecipe":
        """Build from a Firestore snapshot's id and dict."""
        return cls(id=doc_id, **{key: value for key, value in data.items() if key in cls.model_fields and key != "id"})


class UserProfile(BaseModel):
    """Companion profile document created once at sign-up."""

    userId: str
    userEmail: Optional[str] = None
    username: str
    createdAt: Optional[datetime] = None
    schemaVersion: int = SCHEMA_VERSION


class ErrorResponse(BaseModel):
    """Error body shared by every endpoint."""

    error: str
    message: str
    retryable: bool = False
    request_id: Optional[str] = None
