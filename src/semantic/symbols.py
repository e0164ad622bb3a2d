from __future__ import annotations
from dataclasses import dataclass, field
from typing import List


@dataclass
class Symbol:
    name: str
    type: str  # Texto del tipo tal como se declaró (ej. 'INTEGER', 'ARRAY[1:5] OF CHAR')
    line: int = 0  # Línea donde se declaró
    kind: str = field(default="", init=False)


@dataclass
class VariableSymbol(Symbol):
    kind: str = field(default="var", init=False)


@dataclass
class ConstantSymbol(Symbol):
    kind: str = field(default="const", init=False)


@dataclass
class ParamSymbol(Symbol):
    kind: str = field(default="param", init=False)

    by_ref: bool = False  # Declarado con BYREF


@dataclass
class FunctionSymbol(Symbol):
    params: List[ParamSymbol] = field(default_factory=list)
    kind: str = field(default="func", init=False)


@dataclass
class ArraySymbol:
    name: str
    lower: int  # Límite inferior (inclusivo)
    upper: int  # Límite superior (inclusivo)
    line: int = 0

    def contains(self, index: int) -> bool:
        return self.lower <= index <= self.upper

    @property
    def range_text(self) -> str:
        return f"[{self.lower}:{self.upper}]"
