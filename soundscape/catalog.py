"""
Sound catalog for Soundscape.

The catalog is a fixed, ordered, read-only list of track descriptors keyed
by a stable id. The mixer only ever reads it.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List

from .errors import ResourceNotFound

logger = logging.getLogger("Soundscape.Catalog")


class Category(Enum):
    """Sound category with the icon used by the category tabs."""
    NATURE = "Nature"
    WEATHER = "Weather"
    AMBIENT = "Ambient"
    MEDITATION = "Meditation"

    @property
    def icon(self) -> str:
        return _CATEGORY_ICONS[self]


_CATEGORY_ICONS = {
    Category.NATURE: "leaf",
    Category.WEATHER: "cloud",
    Category.AMBIENT: "sparkles",
    Category.MEDITATION: "heart",
}


@dataclass(frozen=True)
class TrackDescriptor:
    """
    An ambient sound the user can add to the mix.

    Attributes:
        id: Stable identifier, also used as the mixer key
        display_name: Label shown on the sound tile
        resource_ref: Name of the backing audio resource (file stem)
        category: Category used for browsing
        description: One-line description
        theme_color: Tile accent color (hex string)
        icon: Symbolic icon name
    """
    id: str
    display_name: str
    resource_ref: str
    category: Category
    description: str
    theme_color: str
    icon: str = ""


def _sound(name, icon, category, description, color):
    return TrackDescriptor(
        id=name,
        display_name=name.capitalize(),
        resource_ref=name,
        category=category,
        description=description,
        theme_color=color,
        icon=icon,
    )


BLUE = "#3b82f6"
PURPLE = "#8b5cf6"
GREEN = "#22c55e"
ORANGE = "#f97316"
GRAY = "#9ca3af"

DEFAULT_SOUNDS = (
    _sound("rain", "cloud-rain", Category.WEATHER, "Gentle rainfall to help you relax", BLUE),
    _sound("thunder", "cloud-bolt", Category.WEATHER, "Distant thunder sounds", PURPLE),
    _sound("breeze", "wind", Category.NATURE, "Soft wind through trees", GREEN),
    _sound("crickets", "ant", Category.NATURE, "Evening cricket chorus", GREEN),
    _sound("waves", "water-waves", Category.NATURE, "Calming ocean waves", BLUE),
    _sound("forest", "tree", Category.NATURE, "Peaceful forest ambience", GREEN),
    _sound("fireplace", "flame", Category.AMBIENT, "Cozy fireplace crackle", ORANGE),
    _sound("whitenoise", "waveform", Category.AMBIENT, "Soothing white noise", GRAY),
    _sound("meditation", "heart-circle", Category.MEDITATION, "Peaceful meditation bells", PURPLE),
    _sound("chimes", "bell", Category.MEDITATION, "Gentle wind chimes", PURPLE),
)


class SoundCatalog:
    """Ordered, id-keyed collection of TrackDescriptors."""

    def __init__(self, sounds: Iterable[TrackDescriptor] = DEFAULT_SOUNDS):
        self._sounds: List[TrackDescriptor] = list(sounds)
        self._by_id: Dict[str, TrackDescriptor] = {}
        for sound in self._sounds:
            if sound.id in self._by_id:
                raise ValueError(f"Duplicate sound id in catalog: {sound.id}")
            self._by_id[sound.id] = sound
        logger.debug(f"Catalog loaded with {len(self._sounds)} sounds")

    def __iter__(self) -> Iterator[TrackDescriptor]:
        return iter(self._sounds)

    def __len__(self) -> int:
        return len(self._sounds)

    def __contains__(self, track_id) -> bool:
        return track_id in self._by_id

    def get(self, track_id: str) -> TrackDescriptor:
        """
        Look up a descriptor by id.

        Raises:
            ResourceNotFound: if no sound has this id
        """
        try:
            return self._by_id[track_id]
        except KeyError:
            raise ResourceNotFound(track_id, f"No sound with id '{track_id}' in catalog") from None

    def ids(self) -> List[str]:
        return [sound.id for sound in self._sounds]

    def by_category(self, category: Category) -> List[TrackDescriptor]:
        return [sound for sound in self._sounds if sound.category == category]
