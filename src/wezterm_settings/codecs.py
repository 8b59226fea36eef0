"""Literal ↔ enum tables for every enumerated WezTerm setting.

Each ``EnumCodec`` is a closed table from normalised Lua literal to
variant, plus the variant used when a literal is not in the table.

``lookup`` answers "is this a known literal?" and returns ``None`` when it
is not; the editor uses it to reject bad input.  ``decode`` is what the
extractor uses: an unknown literal quietly becomes the fallback.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, TypeVar

from .models import (
    AudibleBell,
    CloseConfirmation,
    CursorStyle,
    EaseFunction,
    ExitBehavior,
    FontWeight,
    FreetypeTarget,
    FrontEnd,
    PowerPreference,
    WindowDecorations,
)

log = logging.getLogger("wezterm-settings.codecs")

E = TypeVar("E", bound=Enum)


def _normalise(literal: str) -> str:
    # "INTEGRATED_BUTTONS | RESIZE" and "integrated_buttons|resize" are the same
    return re.sub(r"\s+", "", literal).lower()


@dataclass(frozen=True)
class EnumCodec(Generic[E]):
    enum: type[E]
    fallback: Optional[E]
    aliases: dict[str, E] = field(default_factory=dict)

    @property
    def table(self) -> dict[str, E]:
        table = {_normalise(m.value): m for m in self.enum}
        table.update({_normalise(k): v for k, v in self.aliases.items()})
        return table

    def lookup(self, literal: str) -> Optional[E]:
        return self.table.get(_normalise(literal))

    def decode(self, literal: str) -> Optional[E]:
        found = self.lookup(literal)
        if found is None:
            log.debug(
                "Unknown %s literal %r, using %s",
                self.enum.__name__, literal,
                self.fallback.value if self.fallback is not None else "nothing",
            )
            return self.fallback
        return found

    def choices(self) -> list[str]:
        return [m.value for m in self.enum]


FONT_WEIGHT = EnumCodec(FontWeight, None, {
    "extra-light": FontWeight.EXTRA_LIGHT,
    "normal": FontWeight.REGULAR,
    "demi-bold": FontWeight.DEMI_BOLD,
    "semibold": FontWeight.DEMI_BOLD,
    "semi-bold": FontWeight.DEMI_BOLD,
    "extra-bold": FontWeight.EXTRA_BOLD,
    "heavy": FontWeight.BLACK,
})

FREETYPE_TARGET = EnumCodec(FreetypeTarget, None, {
    "horizontal_lcd": FreetypeTarget.HORIZONTAL_LCD,
})

WINDOW_DECORATIONS = EnumCodec(WindowDecorations, WindowDecorations.FULL, {
    "RESIZE|INTEGRATED_BUTTONS": WindowDecorations.INTEGRATED_BUTTONS_RESIZE,
})

# "NeverPrompt" and any unknown literal both land on NEVER_PROMPT.
CLOSE_CONFIRMATION = EnumCodec(CloseConfirmation, CloseConfirmation.NEVER_PROMPT)

CURSOR_STYLE = EnumCodec(CursorStyle, CursorStyle.BLINKING_BLOCK)

EASE_FUNCTION = EnumCodec(EaseFunction, EaseFunction.EASE_OUT)

FRONT_END = EnumCodec(FrontEnd, FrontEnd.WEBGPU)

POWER_PREFERENCE = EnumCodec(PowerPreference, PowerPreference.HIGH_PERFORMANCE)

EXIT_BEHAVIOR = EnumCodec(ExitBehavior, ExitBehavior.CLOSE_ON_CLEAN_EXIT)

AUDIBLE_BELL = EnumCodec(AudibleBell, AudibleBell.DISABLED)

CODECS: dict[type[Enum], EnumCodec] = {
    c.enum: c
    for c in (
        FONT_WEIGHT, FREETYPE_TARGET, WINDOW_DECORATIONS, CLOSE_CONFIRMATION,
        CURSOR_STYLE, EASE_FUNCTION, FRONT_END, POWER_PREFERENCE,
        EXIT_BEHAVIOR, AUDIBLE_BELL,
    )
}


def codec_for(enum_cls: type[E]) -> EnumCodec[E]:
    return CODECS[enum_cls]
