"""
Player Controls Widget for Soundscape.

Master volume slider, loop toggle, Stop All, and the list of playing sounds.
"""

import logging
import tkinter as tk
from typing import Callable, Optional

import customtkinter as ctk

from config import (
    COLOR_BG_MEDIUM, COLOR_BTN_PRIMARY, COLOR_BTN_DANGER, COLOR_BTN_DISABLED,
    COLOR_BTN_TEXT, COLOR_TEXT, COLOR_TEXT_DIM, BTN_HEIGHT, BTN_FONT_SIZE,
    PADDING_SMALL, PADDING_MEDIUM,
)

logger = logging.getLogger("Soundscape.PlayerControls")


class PlayerControls(ctk.CTkFrame):
    """
    Bottom control bar.
    """

    def __init__(
        self,
        parent: tk.Widget,
        on_volume: Optional[Callable[[float], None]] = None,
        on_toggle_loop: Optional[Callable] = None,
        on_stop_all: Optional[Callable] = None,
        **kwargs
    ):
        super().__init__(parent, fg_color=COLOR_BG_MEDIUM, **kwargs)

        self.on_volume = on_volume
        self.on_toggle_loop = on_toggle_loop
        self.on_stop_all = on_stop_all

        self._create_widgets()
        logger.debug("PlayerControls initialized")

    def _create_widgets(self):
        self.now_playing = ctk.CTkLabel(
            self, text="Nothing playing",
            font=("Segoe UI", 12), text_color=COLOR_TEXT_DIM
        )
        self.now_playing.pack(fill="x", padx=PADDING_MEDIUM, pady=(PADDING_MEDIUM, 0))

        row = ctk.CTkFrame(self, fg_color="transparent")
        row.pack(fill="x", padx=PADDING_MEDIUM, pady=PADDING_MEDIUM)

        ctk.CTkLabel(row, text="🔈", text_color=COLOR_TEXT).pack(side="left")
        self.volume_slider = ctk.CTkSlider(row, from_=0.0, to=1.0, command=self._on_volume_change)
        self.volume_slider.pack(side="left", fill="x", expand=True, padx=PADDING_SMALL)
        ctk.CTkLabel(row, text="🔊", text_color=COLOR_TEXT).pack(side="left")

        self.btn_loop = ctk.CTkButton(
            row, text="↻  Loop", width=100, height=BTN_HEIGHT,
            font=("Segoe UI", BTN_FONT_SIZE, "bold"),
            fg_color=COLOR_BTN_DISABLED, text_color=COLOR_BTN_TEXT,
            command=self._on_loop_click
        )
        self.btn_loop.pack(side="left", padx=(PADDING_MEDIUM, PADDING_SMALL))

        self.btn_stop_all = ctk.CTkButton(
            row, text="■  Stop All", width=110, height=BTN_HEIGHT,
            font=("Segoe UI", BTN_FONT_SIZE, "bold"),
            fg_color=COLOR_BTN_DANGER, text_color=COLOR_BTN_TEXT,
            command=self._on_stop_all_click
        )
        self.btn_stop_all.pack(side="left", padx=PADDING_SMALL)

    def _on_volume_change(self, value):
        if self.on_volume:
            self.on_volume(float(value))

    def _on_loop_click(self):
        if self.on_toggle_loop:
            self.on_toggle_loop()

    def _on_stop_all_click(self):
        if self.on_stop_all:
            self.on_stop_all()

    def update_state(self, state, catalog):
        """Refresh from a MixerState snapshot."""
        if abs(self.volume_slider.get() - state.shared_volume) > 0.005:
            self.volume_slider.set(state.shared_volume)

        self.btn_loop.configure(fg_color=COLOR_BTN_PRIMARY if state.loop_enabled else COLOR_BTN_DISABLED)

        names = [s.display_name for s in catalog if s.id in state.active_track_ids]
        if names:
            self.now_playing.configure(text="Playing: " + ", ".join(names), text_color=COLOR_TEXT)
        else:
            self.now_playing.configure(text="Nothing playing", text_color=COLOR_TEXT_DIM)
        self.btn_stop_all.configure(state="normal" if names else "disabled")
