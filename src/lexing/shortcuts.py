"""
Sustitución de atajos del editor por los símbolos del dialecto.

Es una comodidad de edición: el checker trabaja sobre el texto que reciba.
"""

from typing import Dict, Optional

DEFAULT_SHORTCUTS: Dict[str, str] = {
    "<--": "←",
    "!=": "≠",
    "<=": "≤",
    ">=": "≥",
}

# Símbolos que el editor ofrece como botones
SYMBOL_BUTTONS = ("←", "≠", "≤", "≥")


def apply_shortcuts(text: str, table: Optional[Dict[str, str]] = None) -> str:
    """
    Reemplaza cada atajo por su símbolo.

    Los atajos más largos se aplican primero para que '<--' no quede
    partido por otro atajo que empiece igual.
    """
    table = DEFAULT_SHORTCUTS if table is None else table
    for shortcut in sorted(table, key=len, reverse=True):
        text = text.replace(shortcut, table[shortcut])
    return text
