from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union
import re

_STRING_RE = re.compile(r'"[^"]*"')
_CHAR_RE = re.compile(r"'[^']*'")
_COMMENT_RE = re.compile(r"//.*$")
_TOKEN_RE = re.compile(r"\b[a-zA-Z_][a-zA-Z0-9_]*\b")


@dataclass(frozen=True)
class SourceLine:
    """Una línea del programa con sus vistas precalculadas."""
    number: int          # Número de línea (desde 1)
    raw: str             # Texto original
    text: str            # Texto sin espacios al inicio/final
    code: str            # Texto sin literales ni comentarios
    indent: int          # Cantidad de espacios iniciales
    words: Tuple[str, ...] = ()

    @property
    def first_word(self) -> str:
        return self.words[0] if self.words else ""

    @property
    def is_blank(self) -> bool:
        return self.text == ""

    @property
    def is_comment(self) -> bool:
        return self.text.startswith("//")

    @property
    def is_content(self) -> bool:
        return not self.is_blank and not self.is_comment

    @property
    def unclosed_string(self) -> bool:
        # Cantidad impar de comillas dobles
        return self.text.count('"') % 2 != 0

    def tokens(self) -> List[str]:
        return identifier_tokens(self.code)


@dataclass
class ScanResult:
    """Contenedor para las líneas escaneadas de un programa."""
    source: str
    lines: List[SourceLine] = field(default_factory=list)

    def has_content(self) -> bool:
        return any(line.is_content for line in self.lines)

    def __len__(self) -> int:
        return len(self.lines)


def strip_literals(text: str) -> str:
    """
    Elimina cadenas, literales CHAR y comentarios '//' de una línea.

    Una comilla doble sin cerrar corta la línea: lo que sigue es texto de la
    cadena.
    """
    without = _STRING_RE.sub("", text).split('"', 1)[0]
    without = _CHAR_RE.sub("", without)
    return _COMMENT_RE.sub("", without).strip()


def strip_strings(text: str) -> str:
    """Elimina solo las cadenas entre comillas dobles y los comentarios."""
    return _COMMENT_RE.sub("", _STRING_RE.sub("", text))


def identifier_tokens(code: str) -> List[str]:
    return _TOKEN_RE.findall(code)


def scan_line(number: int, raw: str) -> SourceLine:
    text = raw.strip()
    return SourceLine(
        number=number,
        raw=raw,
        text=text,
        code=strip_literals(text),
        indent=len(raw) - len(raw.lstrip()),
        words=tuple(text.split()),
    )


def scan_source(code: str) -> ScanResult:
    """Divide el texto fuente por '\\n' y escanea cada línea."""
    lines = [scan_line(i, raw) for i, raw in enumerate(code.split("\n"), start=1)]
    return ScanResult(source=code, lines=lines)


def scan_file(
    path: Union[str, Path],
    *,
    encoding: Optional[str] = "utf-8",
) -> ScanResult:
    return scan_source(Path(str(path)).read_text(encoding=encoding))
