from __future__ import annotations
from dataclasses import dataclass, field
from typing import List

from .diagnostics import Diagnostic, ERROR, WARNING


@dataclass(frozen=True)
class CheckResult:
    """Resultado de una pasada del checker: diagnósticos + tabla de símbolos."""
    diagnostics: List[Diagnostic] = field(default_factory=list)
    symbols: list = field(default_factory=list)

    # El veredicto se deriva: válido si no hay ningún 'error'
    @property
    def is_valid(self) -> bool:
        return not any(d.severity == ERROR for d in self.diagnostics)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == ERROR]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == WARNING]

    def on_line(self, line: int) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.line == line]

    def to_dict(self) -> dict:
        return {
            "isValid": self.is_valid,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "symbols": self.symbols,
        }
