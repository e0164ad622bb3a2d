"""
Palabras reservadas del pseudocódigo Cambridge 9618.

Todas las palabras clave deben escribirse en MAYÚSCULAS.
"""

import re

# Operador de asignación del dialecto (no es '=')
ASSIGN = "←"

KEYWORDS = frozenset({
    # Declaraciones
    "DECLARE", "CONSTANT", "TYPE", "ENDTYPE", "DEFINE",
    # Tipos de datos
    "INTEGER", "REAL", "CHAR", "STRING", "BOOLEAN", "DATE", "ARRAY", "OF", "SET",
    # Estructuras de control
    "IF", "THEN", "ELSE", "ENDIF", "ELSEIF",
    "CASE", "ENDCASE", "OTHERWISE",
    "FOR", "TO", "NEXT", "STEP",
    "WHILE", "ENDWHILE", "REPEAT", "UNTIL",
    "BREAK",
    # Procedimientos y funciones
    "PROCEDURE", "ENDPROCEDURE", "FUNCTION", "ENDFUNCTION", "RETURN", "RETURNS",
    "CALL", "BYVAL", "BYREF",
    # Entrada/Salida
    "INPUT", "OUTPUT",
    # Archivos
    "OPENFILE", "READFILE", "WRITEFILE", "CLOSEFILE", "SEEK", "GETRECORD", "PUTRECORD",
    # Operadores
    "AND", "OR", "NOT", "MOD", "DIV",
    # Booleanos
    "TRUE", "FALSE",
    # Funciones de cadena
    "RIGHT", "LEFT", "LENGTH", "MID", "LCASE", "UCASE",
    # Funciones numéricas
    "INT", "RAND",
})

# Apertura de bloque -> cierre requerido
BLOCK_KEYWORDS = {
    "IF": "ENDIF",
    "FOR": "NEXT",
    "WHILE": "ENDWHILE",
    "REPEAT": "UNTIL",
    "PROCEDURE": "ENDPROCEDURE",
    "FUNCTION": "ENDFUNCTION",
    "CASE": "ENDCASE",
    "TYPE": "ENDTYPE",
}

CLOSERS = frozenset(BLOCK_KEYWORDS.values())

# Palabras de otros lenguajes que el dialecto no admite
FOREIGN_KEYWORDS = frozenset({"CONTINUE", "DO", "SWITCH", "DEFAULT", "TRY", "CATCH"})

# Palabras que convierten '=' en comparación
TEST_KEYWORDS = ("IF", "ELSEIF", "WHILE", "UNTIL")

# Palabras que activan la verificación de uso de variables
USAGE_TRIGGERS = ("OUTPUT", "INPUT", "IF", "WHILE")

IDENTIFIER = r"[a-zA-Z_][a-zA-Z0-9_]*"
IDENTIFIER_RE = re.compile(rf"^{IDENTIFIER}$")
STRICT_IDENTIFIER_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


def is_keyword(word: str) -> bool:
    return word.upper() in KEYWORDS


def is_opener(word: str) -> bool:
    return word in BLOCK_KEYWORDS


def is_closer(word: str) -> bool:
    return word in CLOSERS


def closer_for(opener: str) -> str:
    """Devuelve el cierre requerido para una palabra de apertura."""
    return BLOCK_KEYWORDS[opener]
