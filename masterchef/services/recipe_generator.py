"""Recipe generation: prompt construction around a single Gemini call."""

from __future__ import annotations

import logging
from typing import List, Optional

from masterchef.services.gemini_service import GeminiService
from masterchef.utils.exceptions import MasterChefException, UpstreamFailure

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an assistant that receives a list of ingredients that a user has and suggests "
    "a recipe they could make with some or all of those ingredients. You don't need to use "
    "every ingredient they mention in your recipe. The recipe can include additional "
    "ingredients they didn't mention, but try not to include too many extra ingredients. "
    "Format your response in markdown to make it easier to render to a web page"
)


def build_user_message(ingredients: List[str], dietary_preferences: Optional[List[str]] = None) -> str:
    """User turn: the ingredients (and preferences, if any) joined by commas."""
    message = f"I have {', '.join(ingredients)}. Please give me a recipe you'd recommend I make!"
    if dietary_preferences:
        message += f" Dietary preferences: {', '.join(dietary_preferences)}."
    return message


class RecipeGenerator:
    """Turns validated ingredients into one markdown recipe."""

    def __init__(self, gemini_service: Optional[GeminiService] = None):
        self.gemini_service = gemini_service or GeminiService()

    async def generate(
        self,
        ingredients: List[str],
        dietary_preferences: Optional[List[str]] = None,
        system_prompt: Optional[str] = None,
    ) -> str:
        instruction = system_prompt.strip() if system_prompt and system_prompt.strip() else SYSTEM_PROMPT
        user_message = build_user_message(ingredients, dietary_preferences)

        logger.info(
            "Generating recipe from %d ingredients",
            len(ingredients),
            extra={"dietary_preferences": dietary_preferences or [], "custom_prompt": instruction != SYSTEM_PROMPT},
        )

        try:
            return await self.gemini_service.generate_text(
                system_instruction=instruction,
                user_message=user_message,
            )
        except MasterChefException:
            raise
        except Exception as e:
            logger.error(f"Unexpected error generating recipe: {str(e)}", exc_info=True)
            raise UpstreamFailure("Failed to generate recipe. Please try again.") from e
