import pytest

from soundscape.catalog import DEFAULT_SOUNDS, Category, SoundCatalog, TrackDescriptor
from soundscape.errors import ResourceNotFound


def test_default_catalog_order_and_ids(catalog):
    assert catalog.ids() == [
        "rain", "thunder", "breeze", "crickets", "waves",
        "forest", "fireplace", "whitenoise", "meditation", "chimes",
    ]
    assert len(catalog) == len(DEFAULT_SOUNDS)


def test_lookup_by_id(catalog):
    rain = catalog.get("rain")

    assert rain.display_name == "Rain"
    assert rain.resource_ref == "rain"
    assert rain.category is Category.WEATHER
    assert "rain" in catalog
    assert "bagpipes" not in catalog


def test_unknown_id_raises_resource_not_found(catalog):
    with pytest.raises(ResourceNotFound) as info:
        catalog.get("bagpipes")

    assert info.value.resource_ref == "bagpipes"


def test_by_category(catalog):
    meditation = [s.id for s in catalog.by_category(Category.MEDITATION)]

    assert meditation == ["meditation", "chimes"]
    assert sum(len(catalog.by_category(c)) for c in Category) == len(catalog)


def test_duplicate_ids_are_rejected():
    sound = TrackDescriptor("rain", "Rain", "rain", Category.WEATHER, "", "#000000")

    with pytest.raises(ValueError):
        SoundCatalog([sound, sound])


def test_descriptors_are_immutable(catalog):
    with pytest.raises(AttributeError):
        catalog.get("rain").display_name = "Drizzle"


def test_category_icons():
    assert Category.NATURE.icon == "leaf"
    assert all(c.icon for c in Category)
