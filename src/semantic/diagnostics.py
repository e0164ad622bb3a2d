from __future__ import annotations  # Permite la anotación de tipo en el mismo archivo antes de Python 3.10.
from dataclasses import dataclass, asdict  # Utiliza `dataclass` para crear clases con atributos fáciles de gestionar.
from typing import Iterable, Iterator, List, Literal  # Tipos para listas, iteradores y literales.

Severity = Literal["error", "warning"]

ERROR: Severity = "error"
WARNING: Severity = "warning"

# Códigos de diagnóstico (uno por categoría)
E_NO_CONTENT = "E000"
W_INDENT = "W001"
E_ASSIGN_OP = "E010"
E_IDENTIFIER = "E011"
E_UNRECOGNIZED = "E012"
E_UNKNOWN_KEYWORD = "E013"
E_KEYWORD_CASE = "E014"
E_FOREIGN_KEYWORD = "E015"
E_BLOCK = "E020"
E_RESERVED_NAME = "E030"
E_REDECLARED_TYPE = "E031"
W_REDECLARED = "W031"
E_DECLARATION = "E032"
E_STATEMENT = "E033"
E_ARRAY_BOUNDS = "E040"
E_UNDECLARED = "E041"
E_CALL_MISUSE = "E042"
E_FILE_MODE = "E043"
E_CHAR_LITERAL = "E044"
E_UNCLOSED_STRING = "E045"
E_TYPE_MISMATCH = "E046"
W_EMPTY_LOOP = "W050"


# Clase que representa un diagnóstico emitido por una regla del checker.
@dataclass(frozen=True)
class Diagnostic:
    line: int            # Línea del programa (desde 1).
    message: str         # Descripción legible del problema.
    severity: Severity   # 'error' invalida el programa, 'warning' no.
    code: str = ""       # Categoría del diagnóstico, por ejemplo 'E041'.

    @property
    def key(self) -> tuple:
        # Identidad usada al eliminar duplicados
        return (self.line, self.message)

    @property
    def is_error(self) -> bool:
        return self.severity == ERROR

    # Convierte el objeto `Diagnostic` en un diccionario. Útil para la serialización.
    def to_dict(self):
        return asdict(self)


def deduplicate(items: Iterable[Diagnostic]) -> List[Diagnostic]:
    """Conserva el primer diagnóstico de cada par (línea, mensaje), respetando el orden."""
    seen = set()
    unique: List[Diagnostic] = []
    for d in items:
        if d.key in seen:
            continue
        seen.add(d.key)
        unique.append(d)
    return unique


# Clase que gestiona una colección ordenada de diagnósticos.
class Diagnostics:
    def __init__(self, items: Iterable[Diagnostic] = ()):
        self._items: List[Diagnostic] = list(items)  # Lista que almacena todos los diagnósticos.

    # Añade un nuevo diagnóstico a la lista.
    def add(self, *, line: int, message: str, severity: Severity = ERROR, code: str = "") -> Diagnostic:
        d = Diagnostic(line=line, message=message, severity=severity, code=code)
        self._items.append(d)
        return d

    def error(self, line: int, message: str, code: str = "") -> Diagnostic:
        return self.add(line=line, message=message, severity=ERROR, code=code)

    def warning(self, line: int, message: str, code: str = "") -> Diagnostic:
        return self.add(line=line, message=message, severity=WARNING, code=code)

    @property
    def items(self) -> List[Diagnostic]:
        return list(self._items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
