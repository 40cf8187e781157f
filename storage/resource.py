"""Backing resource abstraction for button map persistence"""
import abc
import copy
from typing import Optional

from core.features import ButtonMapData


class ButtonMapResource(abc.ABC):
    @abc.abstractmethod
    def load(self) -> Optional[ButtonMapData]:
        """Return the stored button map, or None if it can't be read."""
        raise NotImplementedError

    @abc.abstractmethod
    def save(self, button_map: ButtonMapData) -> bool:
        raise NotImplementedError


class MemoryResource(ButtonMapResource):
    """Keeps a private copy of the button map in memory"""

    def __init__(self, button_map: Optional[ButtonMapData] = None):
        self._button_map = copy.deepcopy(button_map) if button_map else {}
        self.load_count = 0
        self.save_count = 0

    def load(self) -> Optional[ButtonMapData]:
        self.load_count += 1
        return copy.deepcopy(self._button_map)

    def save(self, button_map: ButtonMapData) -> bool:
        self.save_count += 1
        self._button_map = copy.deepcopy(button_map)
        return True
