"""
Main window for Soundscape.

A thin shell over MixerFacade: every button is an intent on the facade and
every redraw comes from a MixerState snapshot. Facade events arrive on the
mixer's worker thread, so they are pushed through a queue and handled on the
Tk main thread.
"""

import queue
import logging

import customtkinter as ctk

from config import (
    WINDOW_TITLE, WINDOW_WIDTH, WINDOW_HEIGHT, WINDOW_MIN_WIDTH, WINDOW_MIN_HEIGHT,
    COLOR_BG_DARK, COLOR_TEXT_DIM, COLOR_BTN_DANGER, APPEARANCE_MODE,
    PADDING_SMALL, PADDING_MEDIUM, UI_POLL_MS, UI_COUNTDOWN_MS,
)
from soundscape.errors import MixerError
from utils.formatting import format_minutes
from utils.preferences import set_mixer_preferences, set_theme_preference

from .player_controls import PlayerControls
from .settings_panel import SettingsPanel
from .sound_grid import SoundGrid

logger = logging.getLogger("Soundscape.App")


class SoundscapeApp(ctk.CTk):
    def __init__(self, facade):
        super().__init__()

        # Events from the mixer worker thread land here
        self.msg_queue = queue.Queue()
        self.facade = facade

        self.title(WINDOW_TITLE)
        self.geometry(f"{WINDOW_WIDTH}x{WINDOW_HEIGHT}")
        self.minsize(WINDOW_MIN_WIDTH, WINDOW_MIN_HEIGHT)
        self.configure(fg_color=COLOR_BG_DARK)

        ctk.set_appearance_mode(APPEARANCE_MODE)
        ctk.set_default_color_theme("blue")

        self._create_widgets()
        self._wire_callbacks()
        self._bind_shortcuts()

        self.protocol("WM_DELETE_WINDOW", self._on_close)

        self._apply_state(self.facade.state)
        self.settings.load_state(self.facade.state)

        self.after(UI_POLL_MS, self._check_msg_queue)
        self.after(UI_COUNTDOWN_MS, self._refresh_countdown)

        logger.info("SoundscapeApp UI initialized")

    def _create_widgets(self):
        body = ctk.CTkFrame(self, fg_color="transparent")
        body.pack(fill="both", expand=True)

        self.grid_panel = SoundGrid(body, self.facade.catalog, on_toggle=self._on_toggle_track)
        self.grid_panel.pack(side="left", fill="both", expand=True)

        self.settings = SettingsPanel(
            body,
            on_fade_in=self.facade.set_fade_in,
            on_fade_out=self.facade.set_fade_out,
            on_arm_timer=self._on_arm_timer,
            on_cancel_timer=self.facade.cancel_sleep_timer,
            on_theme=set_theme_preference,
            width=260,
        )
        self.settings.pack(side="right", fill="y", padx=PADDING_SMALL, pady=PADDING_SMALL)

        self.controls = PlayerControls(
            self,
            on_volume=self.facade.set_volume,
            on_toggle_loop=self.facade.toggle_loop,
            on_stop_all=self.facade.stop_all_now,
        )
        self.controls.pack(fill="x", padx=PADDING_SMALL, pady=(0, PADDING_SMALL))

        self.status_label = ctk.CTkLabel(self, text="", font=("Segoe UI", 11), text_color=COLOR_TEXT_DIM)
        self.status_label.pack(fill="x", padx=PADDING_MEDIUM, pady=(0, PADDING_SMALL))

        if not self.facade.state.output_ready:
            self._show_status("Audio output unavailable - check your sound device", error=True)

    def _wire_callbacks(self):
        """Push facade events onto the thread-safe queue."""
        def q(key): return lambda *args: self.msg_queue.put((key, args))

        self.facade.on('state_changed', q('state_changed'))
        self.facade.on('track_failed', q('track_failed'))
        self.facade.on('sleep_timer_changed', q('sleep_timer_changed'))
        self.facade.on('sleep_timer_fired', q('sleep_timer_fired'))

    def _bind_shortcuts(self):
        self.bind("<space>", lambda e: self.facade.stop_all_now())
        self.bind("l", lambda e: self.facade.toggle_loop())

    def _check_msg_queue(self):
        """Poll the message queue for events from the mixer thread."""
        try:
            while True:
                msg_type, args = self.msg_queue.get_nowait()

                if msg_type == 'state_changed':
                    self._apply_state(*args)
                elif msg_type == 'track_failed':
                    track_id, error = args
                    self._show_status(f"Could not play {track_id}: {error}", error=True)
                elif msg_type == 'sleep_timer_changed':
                    self.settings.update_timer(*args)
                elif msg_type == 'sleep_timer_fired':
                    self._show_status("Sleep timer finished - fading out")
        except queue.Empty:
            pass

        self.after(UI_POLL_MS, self._check_msg_queue)

    def _refresh_countdown(self):
        self.settings.update_timer(self.facade.sleep_timer_state())
        self.after(UI_COUNTDOWN_MS, self._refresh_countdown)

    def _apply_state(self, state):
        self.grid_panel.update_playing(state.active_track_ids, state.stopping_track_ids)
        self.controls.update_state(state, self.facade.catalog)

    def _show_status(self, text, error=False):
        self.status_label.configure(text=text, text_color=COLOR_BTN_DANGER if error else COLOR_TEXT_DIM)

    # =========================================================================
    # INTENTS
    # =========================================================================

    def _on_toggle_track(self, track_id):
        try:
            self.facade.toggle_track(track_id)
            self._show_status("")
        except MixerError as e:
            # Already reported through 'track_failed'
            logger.debug(f"Toggle of '{track_id}' failed: {e}")

    def _on_arm_timer(self, minutes):
        self.facade.arm_sleep_timer(minutes)
        self._show_status(f"Sleep timer set for {format_minutes(minutes)}")

    def _on_close(self):
        """Handle application shutdown."""
        logger.info("Application closing")
        set_mixer_preferences(self.facade.state)
        self.facade.shutdown()
        self.destroy()

    def run(self):
        logger.info("Starting application")
        self.mainloop()
