"""Recipe generation endpoint (the model gateway)."""

import logging

from fastapi import APIRouter, Depends, Request

from masterchef.api.dependencies import get_recipe_generator
from masterchef.models.recipe import GenerateRecipeRequest, GenerateRecipeResponse
from masterchef.services.recipe_generator import RecipeGenerator
from masterchef.utils.validators import validate_dietary_preferences, validate_ingredients

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/recipes", tags=["recipes"])


async def generate(
    request: Request,
    body: GenerateRecipeRequest,
    recipe_generator: RecipeGenerator,
) -> GenerateRecipeResponse:
    """Validate, call the model once, and hand back its markdown unchanged.

    Errors propagate as MasterChefException and are rendered by the app's handler.
    """
    ingredients = validate_ingredients(body.ingredients)
    preferences = validate_dietary_preferences(body.dietaryPreferences)

    logger.info(
        f"Route {request.url.path} called",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "route": request.url.path,
            "params": {"ingredients_count": len(ingredients), "dietary_preferences": preferences},
        },
    )

    recipe = await recipe_generator.generate(ingredients, preferences, body.systemPrompt)
    return GenerateRecipeResponse(recipe=recipe)


@router.post("/generate", response_model=GenerateRecipeResponse)
async def generate_recipe(
    request: Request,
    body: GenerateRecipeRequest,
    recipe_generator: RecipeGenerator = Depends(get_recipe_generator),
) -> GenerateRecipeResponse:
    """
    Generate a recipe from a list of ingredients.

    - **ingredients**: list of strings, or one comma-separated string
    - **dietaryPreferences**: optional tags passed on to the model
    - **systemPrompt**: optional replacement for the built-in instruction
    """
    return await generate(request, body, recipe_generator)
