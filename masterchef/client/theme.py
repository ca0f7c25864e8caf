"""Light/dark preference persisted to a small JSON file."""

import json
import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

DARK = "dark"
LIGHT = "light"


class ThemeStore:
    """Loads the saved theme once; every toggle writes it back."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()
        self.is_dark = self._load() == DARK

    @property
    def theme(self) -> str:
        return DARK if self.is_dark else LIGHT

    def toggle(self) -> bool:
        self.set_dark(not self.is_dark)
        return self.is_dark

    def set_dark(self, value: bool) -> None:
        self.is_dark = bool(value)
        self._save()

    def _load(self) -> Optional[str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable theme file {self.path}: {e}")
            return None
        return data.get("theme") if isinstance(data, dict) else None

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"theme": self.theme}), encoding="utf-8")
