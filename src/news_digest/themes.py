from __future__ import annotations

import os
from typing import Dict, Mapping, Optional

from textual.theme import Theme

from .datamodels import DARK, LIGHT

# --- Theme Configuration ---
DIGEST_LIGHT = Theme(
    name="digest-light",
    primary="#0284c7",
    secondary="#059669",
    accent="#0ea5e9",
    foreground="#1e293b",
    background="#ffffff",
    surface="#f1f5f9",
    panel="#e2e8f0",
    success="#10b981",
    warning="#d97706",
    error="#b91c1c",
    dark=False,
)

DIGEST_DARK = Theme(
    name="digest-dark",
    primary="#7dd3fc",
    secondary="#34d399",
    accent="#38bdf8",
    foreground="#e2e8f0",
    background="#0f172a",
    surface="#1e293b",
    panel="#334155",
    success="#34d399",
    warning="#fbbf24",
    error="#fca5a5",
    dark=True,
)

THEMES: Dict[str, Theme] = {LIGHT: DIGEST_LIGHT, DARK: DIGEST_DARK}

# Background colour codes that terminals report for light schemes.
LIGHT_BACKGROUNDS = {"7", "15"}

# Rotating colours for theme section titles.
SECTION_COLORS = ("#0d9488", "#4f46e5", "#c026d3", "#0284c7")


def theme_for(preference: str) -> Theme:
    return THEMES.get(preference, DIGEST_DARK)


def toggled(preference: str) -> str:
    return DARK if preference == LIGHT else LIGHT


def section_color(index: int) -> str:
    return SECTION_COLORS[index % len(SECTION_COLORS)]


def detect_color_scheme(environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Guess the terminal's colour scheme from COLORFGBG ("fg;bg"), falling back
    to dark when the terminal does not say.
    """
    environ = os.environ if environ is None else environ
    value = environ.get("COLORFGBG", "")
    if not value:
        return DARK
    background = value.split(";")[-1].strip()
    return LIGHT if background in LIGHT_BACKGROUNDS else DARK
