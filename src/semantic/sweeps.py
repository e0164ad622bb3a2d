"""
Barridos posteriores a la pasada por líneas.

Necesitan ver el archivo completo: cierres sobrantes, ENDFOR usado en lugar
de NEXT, tipo de los argumentos de LENGTH() y cuerpos de FOR vacíos.
"""

from __future__ import annotations
import bisect
import re
from typing import List, Sequence

from lexing.keywords import IDENTIFIER
from lexing.line_scanner import SourceLine
from .diagnostics import Diagnostics, E_BLOCK, E_TYPE_MISMATCH, W_EMPTY_LOOP
from .symbol_table import SymbolTable
from .types import supports_length

# Cierre -> prefijo de la línea que lo abre
_CLOSER_FAMILIES = {
    "ENDIF": "IF ",
    "ENDWHILE": "WHILE ",
    "ENDPROCEDURE": "PROCEDURE ",
    "ENDFUNCTION": "FUNCTION ",
    "ENDCASE": "CASE ",
    "ENDTYPE": "TYPE ",
}

_LENGTH_RE = re.compile(rf"LENGTH\s*\(\s*({IDENTIFIER})\s*\)", re.IGNORECASE)


def sweep_extra_closers(lines: Sequence[SourceLine], diag: Diagnostics) -> None:
    """
    Marca un cierre como sobrante cuando, contando hasta su propia línea,
    hay más cierres que aperturas de su familia.

    Es independiente de la pila de bloques y puede repetir hallazgos de ésta.
    """
    opened = dict.fromkeys(_CLOSER_FAMILIES, 0)
    closed = dict.fromkeys(_CLOSER_FAMILIES, 0)
    for line in lines:
        for closer, prefix in _CLOSER_FAMILIES.items():
            if line.text.startswith(prefix):
                opened[closer] += 1
        if line.text in _CLOSER_FAMILIES:
            closed[line.text] += 1
            if closed[line.text] > opened[line.text]:
                diag.error(line.number, f"Extra {line.text} - no matching opening block", E_BLOCK)


def sweep_endfor(lines: Sequence[SourceLine], diag: Diagnostics) -> None:
    """Por cada FOR, el primer ENDFOR posterior se reporta: FOR cierra con NEXT."""
    endfor_at: List[int] = [i for i, line in enumerate(lines) if line.text.startswith("ENDFOR")]
    if not endfor_at:
        return
    for i, line in enumerate(lines):
        if line.first_word != "FOR":
            continue
        pos = bisect.bisect_right(endfor_at, i)
        if pos < len(endfor_at):
            diag.error(lines[endfor_at[pos]].number, "FOR loops must end with NEXT, not ENDFOR", E_BLOCK)


def sweep_length_calls(lines: Sequence[SourceLine], symtab: SymbolTable, diag: Diagnostics) -> None:
    # Usa la tabla final: las declaraciones posteriores al uso también cuentan
    for line in lines:
        for m in _LENGTH_RE.finditer(line.code):
            sym = symtab.current.resolve(m.group(1))
            if sym is not None and not supports_length(sym.type):
                diag.error(
                    line.number,
                    f"LENGTH() can only be used with STRING or ARRAY variables, not {sym.type}",
                    E_TYPE_MISMATCH,
                )


def sweep_empty_for_bodies(lines: Sequence[SourceLine], diag: Diagnostics) -> None:
    for i, line in enumerate(lines):
        if not (line.text.startswith("FOR ") and " TO " in line.text):
            continue
        for nxt in lines[i + 1:]:
            if not nxt.is_content:
                continue
            if nxt.first_word == "NEXT":
                diag.warning(
                    line.number,
                    "Empty FOR loop body - consider adding statements or removing the loop",
                    W_EMPTY_LOOP,
                )
            break


def run_sweeps(lines: Sequence[SourceLine], symtab: SymbolTable, diag: Diagnostics) -> None:
    sweep_extra_closers(lines, diag)
    sweep_endfor(lines, diag)
    sweep_length_calls(lines, symtab, diag)
    sweep_empty_for_bodies(lines, diag)
