from __future__ import annotations  # Permite las anotaciones de tipo en el mismo archivo antes de Python 3.10.
from dataclasses import dataclass, field  # Utiliza `dataclass` para crear clases fáciles de gestionar.
from typing import Dict, Optional  # Importa tipos de datos como diccionarios y opcionales.
from .symbols import Symbol, ArraySymbol, FunctionSymbol  # Símbolos registrados en la tabla.


# Clase que representa un alcance plano: todas las claves se guardan en minúsculas.
@dataclass
class Scope:
    kind: str = "GLOBAL"
    name: str = "__global__"
    symbols: Dict[str, Symbol] = field(default_factory=dict)

    # Define un nuevo símbolo en este alcance.
    def define(self, sym: Symbol):
        key = sym.name.lower()
        if key in self.symbols:
            # Si el símbolo ya está definido, lanza un error.
            raise KeyError(f"Symbol '{sym.name}' already defined in this scope")
        self.symbols[key] = sym

    # Registra el símbolo aunque ya exista (parámetros y constantes).
    def bind(self, sym: Symbol):
        self.symbols[sym.name.lower()] = sym

    # Resuelve un nombre sin distinguir mayúsculas.
    def resolve(self, name: str) -> Optional[Symbol]:
        return self.symbols.get(name.lower())

    def __contains__(self, name: str) -> bool:
        return name.lower() in self.symbols


# Tabla de símbolos de una sola pasada del checker: variables, arreglos y funciones.
class SymbolTable:
    def __init__(self):
        self.current = Scope()
        self.arrays: Dict[str, ArraySymbol] = {}
        self.functions: Dict[str, FunctionSymbol] = {}

    def is_declared(self, name: str) -> bool:
        return name in self.current

    def declare_array(self, arr: ArraySymbol):
        self.arrays[arr.name.lower()] = arr

    def array(self, name: str) -> Optional[ArraySymbol]:
        return self.arrays.get(name.lower())

    def declare_function(self, fn: FunctionSymbol):
        self.functions[fn.name.lower()] = fn

    def is_function(self, name: str) -> bool:
        return name.lower() in self.functions

    # Devuelve una representación de la tabla para mostrarla (CLI e IDE).
    def dump(self) -> list:
        out = [{
            "scope": f"{self.current.kind} {self.current.name}".strip(),
            "entries": [
                {"name": v.name, "kind": v.kind, "type": str(v.type), "line": v.line}
                for v in self.current.symbols.values()
            ],
        }]
        if self.functions:
            out.append({
                "scope": "FUNCTIONS",
                "entries": [
                    {"name": f.name, "kind": f.kind, "type": f.type, "line": f.line}
                    for f in self.functions.values()
                ],
            })
        if self.arrays:
            out.append({
                "scope": "ARRAYS",
                "entries": [
                    {"name": a.name, "kind": "array", "type": a.range_text, "line": a.line}
                    for a in self.arrays.values()
                ],
            })
        return out
