# Nombres de tipo del dialecto como strings simples
INTEGER = "INTEGER"
REAL    = "REAL"
CHAR    = "CHAR"
STRING  = "STRING"
BOOLEAN = "BOOLEAN"
DATE    = "DATE"
ARRAY   = "ARRAY"

# Tipo centinela para constantes (no declaran tipo explícito)
CONSTANT = "CONSTANT"

def normalize_type(type_text: str) -> str:
    """Colapsa espacios para comparar textos de tipo."""
    return " ".join(type_text.split())

# Predicados
def is_char(t):
    return normalize_type(t).upper() == CHAR

def is_string(t):
    return STRING in t.upper()

def is_array(t):
    return ARRAY in t.upper()

def supports_length(t):
    # LENGTH() solo acepta STRING o ARRAY
    return is_string(t) or is_array(t)

def same_type(a, b):
    return normalize_type(a) == normalize_type(b)
