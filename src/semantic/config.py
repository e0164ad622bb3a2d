"""
Configuración del checker.

Los valores por defecto reproducen las reglas de estilo de Cambridge 9618;
un archivo JSON puede ajustar la unidad de sangría, los modos de OPENFILE
y los atajos del editor.
"""

from __future__ import annotations
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple, Union

from lexing.shortcuts import DEFAULT_SHORTCUTS
from .errors import ConfigError

DEFAULT_FILE_MODES: Tuple[str, ...] = ("READ", "WRITE", "APPEND")


@dataclass(frozen=True)
class CheckerConfig:
    indent_unit: int = 3
    file_modes: Tuple[str, ...] = DEFAULT_FILE_MODES
    shortcuts: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SHORTCUTS))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CheckerConfig":
        if not isinstance(data, Mapping):
            raise ConfigError("La configuración debe ser un objeto JSON")

        unknown = set(data) - {"indent_unit", "file_modes", "shortcuts"}
        if unknown:
            raise ConfigError("Clave de configuración desconocida", key=sorted(unknown)[0])

        kwargs: Dict[str, Any] = {}
        if "indent_unit" in data:
            unit = data["indent_unit"]
            if isinstance(unit, bool) or not isinstance(unit, int) or unit < 1:
                raise ConfigError("indent_unit debe ser un entero >= 1", key="indent_unit")
            kwargs["indent_unit"] = unit

        if "file_modes" in data:
            modes = data["file_modes"]
            if not isinstance(modes, (list, tuple)) or not modes or not all(isinstance(m, str) and m for m in modes):
                raise ConfigError("file_modes debe ser una lista no vacía de strings", key="file_modes")
            kwargs["file_modes"] = tuple(m.upper() for m in modes)

        if "shortcuts" in data:
            table = data["shortcuts"]
            if not isinstance(table, Mapping) or not all(
                isinstance(k, str) and k and isinstance(v, str) for k, v in table.items()
            ):
                raise ConfigError("shortcuts debe mapear strings a strings", key="shortcuts")
            kwargs["shortcuts"] = dict(table)

        return cls(**kwargs)


def load_config(path: Union[str, Path]) -> CheckerConfig:
    """Lee un archivo JSON de configuración."""
    p = Path(str(path))
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except OSError as ex:
        raise ConfigError(f"No se pudo leer la configuración {p}: {ex}") from ex
    except json.JSONDecodeError as ex:
        raise ConfigError(f"JSON inválido en {p}: {ex.msg} (línea {ex.lineno})") from ex
    return CheckerConfig.from_dict(data)
