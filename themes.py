"""
Theme Definitions for Soundscape.
Each palette is tuned for a dim bedroom; the light one is for daytime use.
"""

DEFAULT_THEME = "Night Sky"

THEMES = {
    "Night Sky": {
        "bg_primary": "#0f1420", "bg_secondary": "#182033",
        "fg_primary": "#4f7fe0", "text_main": "#e6ecff", "text_dim": "#7a86a8",
        "btn_success": "#2cc985", "btn_danger": "#d63031", "btn_text": "#ffffff",
    },
    "Forest Floor": {
        "bg_primary": "#0e1a12", "bg_secondary": "#16281c",
        "fg_primary": "#4caf6e", "text_main": "#dff5e6", "text_dim": "#6f9179",
        "btn_success": "#4caf6e", "btn_danger": "#b5473a", "btn_text": "#ffffff",
    },
    "Ember": {
        "bg_primary": "#1a0f0a", "bg_secondary": "#2a1910",
        "fg_primary": "#e07b39", "text_main": "#ffe9d9", "text_dim": "#9a7660",
        "btn_success": "#c9a02c", "btn_danger": "#d63031", "btn_text": "#ffffff",
    },
    "Lavender": {
        "bg_primary": "#15121f", "bg_secondary": "#201b30",
        "fg_primary": "#8e74d8", "text_main": "#eee8ff", "text_dim": "#837aa3",
        "btn_success": "#55aa88", "btn_danger": "#aa3355", "btn_text": "#ffffff",
    },
    "Morning Mist": {
        "bg_primary": "#f4f6f8", "bg_secondary": "#e3e8ee",
        "fg_primary": "#3b6ea5", "text_main": "#1b2430", "text_dim": "#66717f",
        "btn_success": "#2e8b57", "btn_danger": "#c0392b", "btn_text": "#ffffff",
    },
}
