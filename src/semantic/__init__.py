"""
Módulo de verificación del pseudocódigo Cambridge 9618.
Exporta la función principal 'analyze' y las clases de diagnósticos y símbolos.
"""

from .checker import analyze, PseudocodeChecker
from .result import CheckResult
from .diagnostics import Diagnostic, Diagnostics, deduplicate, ERROR, WARNING
from .symbols import Symbol, VariableSymbol, ConstantSymbol, ParamSymbol, FunctionSymbol, ArraySymbol
from .symbol_table import SymbolTable, Scope
from .blocks import BlockStack, BlockFrame
from .config import CheckerConfig, load_config
from .errors import CheckerError, ConfigError

__all__ = [
    # Función principal
    'analyze',

    # Checker
    'PseudocodeChecker',
    'CheckResult',

    # Diagnósticos
    'Diagnostic',
    'Diagnostics',
    'deduplicate',
    'ERROR',
    'WARNING',

    # Símbolos
    'Symbol',
    'VariableSymbol',
    'ConstantSymbol',
    'ParamSymbol',
    'FunctionSymbol',
    'ArraySymbol',

    # Tabla de símbolos
    'SymbolTable',
    'Scope',

    # Bloques
    'BlockStack',
    'BlockFrame',

    # Configuración y errores
    'CheckerConfig',
    'load_config',
    'CheckerError',
    'ConfigError',
]
