"""Static catalogs offered by the theme and font selectors.

WezTerm ships 700+ color schemes; this is a curated subset of popular
ones.  Names must match WezTerm's built-in scheme names exactly since they
are written verbatim to ``config.color_scheme``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SchemeInfo:
    name: str
    category: str


_FAMILIES: list[tuple[str, tuple[str, ...]]] = [
    ("Catppuccin", ("Catppuccin Mocha", "Catppuccin Macchiato", "Catppuccin Frappe", "Catppuccin Latte")),
    ("Dracula", ("Dracula", "Dracula+")),
    ("Gruvbox", (
        "Gruvbox Dark", "Gruvbox dark, hard (base16)", "Gruvbox dark, medium (base16)",
        "Gruvbox dark, soft (base16)", "Gruvbox Light",
    )),
    ("Nord", ("Nord", "Nord (Gogh)")),
    ("Tokyo Night", (
        "Tokyo Night", "Tokyo Night Storm", "Tokyo Night Moon",
        "tokyonight", "tokyonight_night", "tokyonight_storm",
    )),
    ("Solarized", ("Solarized Dark", "Solarized Dark Higher Contrast", "Solarized Light")),
    ("One", ("One Dark", "OneDark", "One Half Dark", "One Half Light")),
    ("Monokai", ("Monokai", "Monokai Pro", "Monokai Remastered", "Monokai Soda")),
    ("GitHub", ("GitHub Dark", "GitHub Light")),
    ("Kanagawa", ("Kanagawa", "Kanagawa Dragon", "Kanagawa Wave")),
    ("Rose Pine", ("rose-pine", "rose-pine-moon", "rose-pine-dawn")),
    ("Everforest", ("Everforest Dark", "Everforest Light")),
    ("Material", ("Material", "Material Dark", "Material Lighter", "Material Ocean", "Palenight")),
    ("Ayu", ("Ayu Dark", "Ayu Light", "Ayu Mirage")),
    ("Classic", (
        "Afterglow", "Alabaster", "Base16", "Breeze", "Chalk", "Dark+",
        "Horizon Dark", "Horizon Bright", "Horizon", "Nightfly", "Night Owl",
        "Night Owlish Light", "Oceanic-Next", "Panda", "Papercolor Dark",
        "Papercolor Light", "Snazzy", "Synthwave", "Ubuntu", "Zenburn",
    )),
    ("Fun", (
        "Cyberdyne", "CyberPunk2077", "DoomOne", "Espresso", "Flat", "Floraverse",
        "Grape", "Hipster Green", "IC_Green_PPL", "JetBrains Darcula", "Laser",
        "Lavandula", "Matrix", "Miramare", "Neon", "Nova", "Ocean",
        "Operator Mono Dark", "Outrun Dark", "PaperColor Dark (base16)",
        "PaperColor Light (base16)", "Purplepeter", "Rebecca", "Sonokai",
        "SpaceGray", "Spacemacs", "SynthWave84", "Tango", "Twilight", "UltraDark",
        "Violet Dark", "Violet Light", "Wez", "Whimsy", "Wryan",
        "zenbones", "zenbones_dark", "zenbones_light",
    )),
]

BUILTIN_SCHEMES: list[SchemeInfo] = [
    SchemeInfo(name, category) for category, names in _FAMILIES for name in names
]

COMMON_FONTS: list[str] = [
    # Nerd Fonts
    "JetBrainsMono Nerd Font", "FiraCode Nerd Font", "Hack Nerd Font",
    "CaskaydiaCove Nerd Font", "CaskaydiaMono Nerd Font", "Iosevka Nerd Font",
    "IosevkaTerm Nerd Font", "Iosevka Term", "MesloLGS Nerd Font",
    "MesloLGM Nerd Font", "MesloLGL Nerd Font", "SourceCodePro Nerd Font",
    "UbuntuMono Nerd Font", "RobotoMono Nerd Font", "DejaVuSansMono Nerd Font",
    "InconsolataGo Nerd Font", "Inconsolata Nerd Font", "VictorMono Nerd Font",
    "DroidSansMono Nerd Font", "Cousine Nerd Font", "BitstreamVeraSansMono Nerd Font",
    "CodeNewRoman Nerd Font", "Agave Nerd Font", "Anonymice Nerd Font",
    "Arimo Nerd Font", "AurulentSansMono Nerd Font", "BigBlueTerminal Nerd Font",
    "ComicShannsMono Nerd Font", "Fantasque Sans Mono Nerd Font", "FuraMono Nerd Font",
    "Gohu Nerd Font", "Go Mono Nerd Font", "Hasklug Nerd Font", "Hurmit Nerd Font",
    "iA Writer Mono Nerd Font", "IBMPlexMono Nerd Font", "Lilex Nerd Font",
    "Lekton Nerd Font", "LiterationMono Nerd Font", "M+ Nerd Font",
    "Monofur Nerd Font", "Monoid Nerd Font", "Mononoki Nerd Font",
    "Noto Mono Nerd Font", "OpenDyslexicMono Nerd Font", "Overpass Mono Nerd Font",
    "ProggyClean Nerd Font", "ProFont Nerd Font", "ShareTechMono Nerd Font",
    "SpaceMono Nerd Font", "Terminess Nerd Font", "Tinos Nerd Font",
    "Ubuntu Nerd Font", "0xProto Nerd Font", "3270 Nerd Font", "Zed Mono Nerd Font",
    # Plain monospace
    "JetBrains Mono", "Fira Code", "Cascadia Code", "Cascadia Mono",
    "Source Code Pro", "Hack", "Iosevka", "Victor Mono", "IBM Plex Mono",
    "Inconsolata", "Monaco", "Menlo", "SF Mono", "Consolas", "Courier New",
    "DejaVu Sans Mono", "Ubuntu Mono", "Roboto Mono", "Droid Sans Mono",
    "Anonymous Pro", "PT Mono", "Noto Sans Mono", "Space Mono", "Input Mono",
    "Operator Mono", "Dank Mono", "MonoLisa", "Berkeley Mono",
    "Monaspace Neon", "Monaspace Argon", "Monaspace Xenon", "Monaspace Radon",
    "Monaspace Krypton", "Geist Mono", "Comic Code", "Maple Mono",
    "Commit Mono", "Intel One Mono",
]


def scheme_names() -> list[str]:
    return [s.name for s in BUILTIN_SCHEMES]
