"""
Escaneo por líneas del pseudocódigo Cambridge.
No construye un árbol sintáctico: prepara vistas de cada línea para las reglas.
"""

from .keywords import (
    ASSIGN,
    KEYWORDS,
    BLOCK_KEYWORDS,
    CLOSERS,
    FOREIGN_KEYWORDS,
    is_keyword,
    closer_for,
)
from .line_scanner import (
    SourceLine,
    ScanResult,
    scan_line,
    scan_source,
    scan_file,
    strip_literals,
    identifier_tokens,
)
from .shortcuts import DEFAULT_SHORTCUTS, SYMBOL_BUTTONS, apply_shortcuts

__all__ = [
    'ASSIGN',
    'KEYWORDS',
    'BLOCK_KEYWORDS',
    'CLOSERS',
    'FOREIGN_KEYWORDS',
    'is_keyword',
    'closer_for',
    'SourceLine',
    'ScanResult',
    'scan_line',
    'scan_source',
    'scan_file',
    'strip_literals',
    'identifier_tokens',
    'DEFAULT_SHORTCUTS',
    'SYMBOL_BUTTONS',
    'apply_shortcuts',
]
