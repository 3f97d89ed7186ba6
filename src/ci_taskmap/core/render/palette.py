# src/ci_taskmap/core/render/palette.py
"""Paleta padrão de cores (nomes X11 aceitos pelo Graphviz)."""

from typing import Tuple

# Ordem importa: a primeira cadeia desenhada recebe a primeira cor.
DEFAULT_PALETTE: Tuple[str, ...] = (
    "blue",
    "red",
    "darkgreen",
    "darkorange",
    "purple",
    "brown",
    "deeppink",
    "cadetblue",
    "goldenrod",
    "darkviolet",
    "forestgreen",
    "crimson",
    "dodgerblue",
    "chocolate",
    "darkcyan",
    "olivedrab",
    "mediumvioletred",
    "steelblue",
    "sienna",
    "darkslateblue",
    "indigo",
    "firebrick",
    "teal",
    "darkmagenta",
    "navy",
    "maroon",
    "seagreen",
    "orangered",
    "slateblue",
    "darkgoldenrod",
)

FALLBACK_COLOR = "black"
