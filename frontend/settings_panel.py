import customtkinter as ctk
from config import (
    COLOR_BG_MEDIUM, COLOR_BTN_SUCCESS, COLOR_BTN_TEXT, COLOR_TEXT, COLOR_TEXT_DIM,
    PADDING_MEDIUM, PADDING_LARGE, FADE_MIN_S, FADE_MAX_S, SLEEP_TIMER_CHOICES,
)
from themes import THEMES
from utils.formatting import format_minutes, format_remaining, format_seconds


class SettingsPanel(ctk.CTkFrame):
    def __init__(self, parent, on_fade_in, on_fade_out, on_arm_timer, on_cancel_timer,
                 on_theme=None, **kwargs):
        super().__init__(parent, fg_color=COLOR_BG_MEDIUM, **kwargs)
        self.on_fade_in = on_fade_in
        self.on_fade_out = on_fade_out
        self.on_arm_timer = on_arm_timer
        self.on_cancel_timer = on_cancel_timer
        self.on_theme = on_theme

        self.sliders = {}
        self.labels = {}
        self._choice_by_label = {format_minutes(m): m for m in SLEEP_TIMER_CHOICES}

        self._create_widgets()

    def _create_widgets(self):
        ctk.CTkLabel(
            self, text="⚙  SETTINGS",
            font=("Segoe UI", 12, "bold"),
            text_color=COLOR_TEXT
        ).pack(pady=(PADDING_MEDIUM, PADDING_LARGE))

        self._add_slider("Fade In Duration", "fade_in", self.on_fade_in)
        self._add_slider("Fade Out Duration", "fade_out", self.on_fade_out)

        # Sleep timer
        timer_frame = ctk.CTkFrame(self, fg_color="transparent")
        timer_frame.pack(fill="x", padx=15, pady=(10, 5))

        ctk.CTkLabel(
            timer_frame, text="Sleep Timer",
            font=("Segoe UI", 11, "bold"), text_color=COLOR_TEXT
        ).pack(anchor="w")

        self.timer_menu = ctk.CTkOptionMenu(
            timer_frame, values=list(self._choice_by_label),
        )
        self.timer_menu.set(format_minutes(0))
        self.timer_menu.pack(fill="x", pady=5)

        self.btn_timer = ctk.CTkButton(
            timer_frame, text="Start Timer",
            fg_color=COLOR_BTN_SUCCESS, text_color=COLOR_BTN_TEXT,
            command=self._on_timer_click
        )
        self.btn_timer.pack(fill="x", pady=5)

        self.countdown = ctk.CTkLabel(
            timer_frame, text="",
            font=("Consolas", 12), text_color=COLOR_TEXT_DIM
        )
        self.countdown.pack(anchor="w")

        # Theme (applies on next launch)
        if self.on_theme:
            theme_frame = ctk.CTkFrame(self, fg_color="transparent")
            theme_frame.pack(fill="x", padx=15, pady=(10, PADDING_MEDIUM))
            ctk.CTkLabel(
                theme_frame, text="Theme (restart to apply)",
                font=("Segoe UI", 11, "bold"), text_color=COLOR_TEXT
            ).pack(anchor="w")
            menu = ctk.CTkOptionMenu(theme_frame, values=list(THEMES), command=self.on_theme)
            menu.pack(fill="x", pady=5)

    def _add_slider(self, label_text, key, callback):
        """Create a 0-5 s slider with a value label."""
        frame = ctk.CTkFrame(self, fg_color="transparent")
        frame.pack(fill="x", padx=15, pady=5)

        lbl_frame = ctk.CTkFrame(frame, fg_color="transparent")
        lbl_frame.pack(fill="x")

        ctk.CTkLabel(
            lbl_frame, text=label_text,
            font=("Segoe UI", 11, "bold"),
            text_color=COLOR_TEXT
        ).pack(side="left")

        val_lbl = ctk.CTkLabel(lbl_frame, text="", font=("Consolas", 11), text_color="#88aaff")
        val_lbl.pack(side="right")

        steps = int(FADE_MAX_S - FADE_MIN_S)
        slider = ctk.CTkSlider(
            frame, from_=FADE_MIN_S, to=FADE_MAX_S, number_of_steps=steps,
            command=lambda v: self._on_change(v, val_lbl, callback)
        )
        slider.pack(fill="x", pady=(2, 10))

        self.sliders[key] = slider
        self.labels[key] = val_lbl

    def _on_change(self, value, label, callback):
        seconds = round(float(value))
        label.configure(text=format_seconds(seconds))
        if callback:
            callback(seconds)

    def _on_timer_click(self):
        minutes = self._choice_by_label.get(self.timer_menu.get(), 0)
        if minutes > 0:
            self.on_arm_timer(minutes)
        else:
            self.on_cancel_timer()

    def load_state(self, state):
        """Sync sliders with a MixerState snapshot."""
        for key, value in (("fade_in", state.fade_in_seconds), ("fade_out", state.fade_out_seconds)):
            self.sliders[key].set(value)
            self.labels[key].configure(text=format_seconds(value))

    def update_timer(self, timer_state):
        if timer_state.armed:
            self.countdown.configure(text=f"Stopping in {format_remaining(timer_state.remaining())}")
            self.btn_timer.configure(text="Restart Timer")
        else:
            self.countdown.configure(text="")
            self.btn_timer.configure(text="Start Timer")
