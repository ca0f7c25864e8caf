"""Ingredient entry list and the progress gate in front of generation."""

from dataclasses import dataclass
from typing import Iterator, List, Optional

from masterchef.utils.validators import validate_ingredient_name

REQUIRED_INGREDIENTS = 5


@dataclass(frozen=True)
class GateStatus:
    """What the progress indicator shows for a given ingredient count."""

    count: int
    required: int
    percent: float
    enabled: bool
    indicator: str
    message: str


def progress_gate(count: int, required: int = REQUIRED_INGREDIENTS) -> GateStatus:
    """Generation unlocks once ``count`` reaches ``required``."""
    count = max(0, count)
    percent = min(100.0, count / required * 100)
    remaining = max(0, required - count)

    if remaining:
        noun = "ingredient" if remaining == 1 else "ingredients"
        return GateStatus(
            count=count,
            required=required,
            percent=percent,
            enabled=False,
            indicator=f"{count}/{required}",
            message=f"Add {remaining} more {noun} to unlock recipe generation",
        )

    return GateStatus(
        count=count,
        required=required,
        percent=percent,
        enabled=True,
        indicator="ready",
        message="Ready to generate a recipe!",
    )


class IngredientList:
    """Ordered, duplicate-free (case-sensitive) ingredients for one session."""

    def __init__(self, ingredients: Optional[List[str]] = None):
        self._items: List[str] = []
        for ingredient in ingredients or []:
            self.add(ingredient)

    def add(self, raw: str) -> Optional[str]:
        """
        Add an ingredient typed by the user.

        Returns:
            None on success, otherwise the message to show
        """
        name = (raw or "").strip()

        error = validate_ingredient_name(name)
        if error and not name:
            return error
        if name in self._items:
            return "You already added this ingredient"
        if error:
            return error

        self._items.append(name)
        return None

    def remove(self, name: str) -> None:
        self._items = [item for item in self._items if item != name]

    def clear(self) -> None:
        self._items = []

    @property
    def items(self) -> List[str]:
        return list(self._items)

    @property
    def gate(self) -> GateStatus:
        return progress_gate(len(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __contains__(self, name: object) -> bool:
        return name in self._items
