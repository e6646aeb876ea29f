"""
Sound Grid Widget for Soundscape.

Category tabs (plus Favorites) above a scrollable grid of sound tiles.
Each tile toggles its track and can be starred as a favorite.
"""

import logging
import tkinter as tk
from typing import Callable, Iterable, Optional, Set

import customtkinter as ctk

from config import (
    COLOR_BG_MEDIUM, COLOR_BTN_PRIMARY, COLOR_BTN_TEXT, COLOR_TEXT, COLOR_TEXT_DIM,
    COLOR_FAVORITE, GRID_COLUMNS, TILE_WIDTH, TILE_HEIGHT, PADDING_SMALL, PADDING_MEDIUM,
)
from soundscape.catalog import Category

logger = logging.getLogger("Soundscape.SoundGrid")

FAVORITES_TAB = "Favorites"


class SoundTile(ctk.CTkFrame):
    """One sound: name, description, play toggle and favorite star."""

    def __init__(self, parent, sound, on_toggle, on_favorite, **kwargs):
        super().__init__(parent, width=TILE_WIDTH, height=TILE_HEIGHT, fg_color=COLOR_BG_MEDIUM,
                         border_width=2, border_color=COLOR_BG_MEDIUM, **kwargs)
        self.sound = sound
        self.grid_propagate(False)

        header = ctk.CTkFrame(self, fg_color="transparent")
        header.pack(fill="x", padx=PADDING_MEDIUM, pady=(PADDING_SMALL, 0))

        ctk.CTkLabel(
            header, text=sound.display_name,
            font=("Segoe UI", 14, "bold"), text_color=sound.theme_color
        ).pack(side="left")

        self.btn_star = ctk.CTkButton(
            header, text="☆", width=28, height=24,
            fg_color="transparent", text_color=COLOR_TEXT_DIM,
            command=lambda: on_favorite(sound.id)
        )
        self.btn_star.pack(side="right")

        ctk.CTkLabel(
            self, text=sound.description,
            font=("Segoe UI", 10), text_color=COLOR_TEXT_DIM,
            wraplength=TILE_WIDTH - 20, justify="left"
        ).pack(fill="x", padx=PADDING_MEDIUM)

        self.btn_play = ctk.CTkButton(
            self, text="▶  Play", height=26,
            fg_color=COLOR_BTN_PRIMARY, text_color=COLOR_BTN_TEXT,
            command=lambda: on_toggle(sound.id)
        )
        self.btn_play.pack(fill="x", padx=PADDING_MEDIUM, pady=PADDING_SMALL, side="bottom")

    def set_status(self, playing: bool, stopping: bool):
        if stopping:
            self.btn_play.configure(text="…  Fading out")
            self.configure(border_color=COLOR_TEXT_DIM)
        elif playing:
            self.btn_play.configure(text="■  Stop")
            self.configure(border_color=self.sound.theme_color)
        else:
            self.btn_play.configure(text="▶  Play")
            self.configure(border_color=COLOR_BG_MEDIUM)

    def set_favorite(self, favorite: bool):
        self.btn_star.configure(
            text="★" if favorite else "☆",
            text_color=COLOR_FAVORITE if favorite else COLOR_TEXT_DIM
        )


class SoundGrid(ctk.CTkFrame):
    """
    Category browser and sound tiles.

    Favorites live only in memory for the session.
    """

    def __init__(
        self,
        parent: tk.Widget,
        catalog,
        on_toggle: Optional[Callable[[str], None]] = None,
        **kwargs
    ):
        super().__init__(parent, fg_color="transparent", **kwargs)
        self.catalog = catalog
        self.on_toggle = on_toggle

        self.favorites: Set[str] = set()
        self.selected_tab = Category.NATURE.value
        self._active: Set[str] = set()
        self._stopping: Set[str] = set()
        self._tiles = {}
        self._tab_buttons = {}

        self._create_widgets()
        self._render_tiles()
        logger.debug("SoundGrid initialized")

    def _create_widgets(self):
        tabs = ctk.CTkFrame(self, fg_color="transparent")
        tabs.pack(fill="x", padx=PADDING_MEDIUM, pady=PADDING_SMALL)

        for name in [FAVORITES_TAB] + [c.value for c in Category]:
            btn = ctk.CTkButton(
                tabs, text=name, width=110, height=30,
                command=lambda n=name: self.select_tab(n)
            )
            btn.pack(side="left", padx=PADDING_SMALL)
            self._tab_buttons[name] = btn

        self.grid_area = ctk.CTkScrollableFrame(self, fg_color="transparent")
        self.grid_area.pack(fill="both", expand=True, padx=PADDING_MEDIUM, pady=PADDING_SMALL)

        self.empty_label = ctk.CTkLabel(
            self.grid_area, text="No favorites yet - tap ☆ on a sound",
            font=("Segoe UI", 12), text_color=COLOR_TEXT_DIM
        )

    def visible_sounds(self):
        if self.selected_tab == FAVORITES_TAB:
            return [s for s in self.catalog if s.id in self.favorites]
        return [s for s in self.catalog if s.category.value == self.selected_tab]

    def select_tab(self, name: str):
        self.selected_tab = name
        self._render_tiles()

    def _render_tiles(self):
        for tile in self._tiles.values():
            tile.destroy()
        self._tiles.clear()
        self.empty_label.grid_forget()

        for name, btn in self._tab_buttons.items():
            btn.configure(fg_color=COLOR_BTN_PRIMARY if name == self.selected_tab else COLOR_BG_MEDIUM,
                          text_color=COLOR_BTN_TEXT if name == self.selected_tab else COLOR_TEXT)

        sounds = self.visible_sounds()
        if not sounds:
            self.empty_label.grid(row=0, column=0, padx=PADDING_MEDIUM, pady=PADDING_MEDIUM)
            return

        for index, sound in enumerate(sounds):
            tile = SoundTile(self.grid_area, sound, self._on_tile_toggle, self.toggle_favorite)
            tile.grid(row=index // GRID_COLUMNS, column=index % GRID_COLUMNS,
                      padx=PADDING_SMALL, pady=PADDING_SMALL)
            tile.set_status(sound.id in self._active, sound.id in self._stopping)
            tile.set_favorite(sound.id in self.favorites)
            self._tiles[sound.id] = tile

    def _on_tile_toggle(self, track_id):
        if self.on_toggle:
            self.on_toggle(track_id)

    def toggle_favorite(self, track_id: str):
        if track_id in self.favorites:
            self.favorites.remove(track_id)
        else:
            self.favorites.add(track_id)
        if self.selected_tab == FAVORITES_TAB:
            self._render_tiles()
        elif track_id in self._tiles:
            self._tiles[track_id].set_favorite(track_id in self.favorites)

    def update_playing(self, active: Iterable[str], stopping: Iterable[str]):
        """Refresh tile states from a MixerState snapshot."""
        self._active = set(active)
        self._stopping = set(stopping)
        for track_id, tile in self._tiles.items():
            tile.set_status(track_id in self._active, track_id in self._stopping)
