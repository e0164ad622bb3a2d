# semantic/checker.py
from __future__ import annotations
import logging
import re
from typing import Callable, List, Optional, Tuple

from lexing.keywords import (
    ASSIGN,
    IDENTIFIER,
    IDENTIFIER_RE,
    STRICT_IDENTIFIER_RE,
    KEYWORDS,
    FOREIGN_KEYWORDS,
    TEST_KEYWORDS,
    USAGE_TRIGGERS,
    is_opener,
    is_closer,
)
from lexing.line_scanner import SourceLine, scan_source, strip_strings

from .blocks import BlockStack, unmatched_message
from .config import CheckerConfig
from .diagnostics import (
    Diagnostics,
    deduplicate,
    E_NO_CONTENT,
    W_INDENT,
    E_ASSIGN_OP,
    E_IDENTIFIER,
    E_UNRECOGNIZED,
    E_UNKNOWN_KEYWORD,
    E_KEYWORD_CASE,
    E_FOREIGN_KEYWORD,
    E_BLOCK,
    E_RESERVED_NAME,
    E_REDECLARED_TYPE,
    W_REDECLARED,
    E_DECLARATION,
    E_STATEMENT,
    E_ARRAY_BOUNDS,
    E_UNDECLARED,
    E_CALL_MISUSE,
    E_FILE_MODE,
    E_CHAR_LITERAL,
    E_UNCLOSED_STRING,
)
from .errors import CheckerError
from .result import CheckResult
from .symbol_table import SymbolTable
from .symbols import VariableSymbol, ConstantSymbol, ParamSymbol, FunctionSymbol, ArraySymbol
from .sweeps import run_sweeps
from .types import CONSTANT, normalize_type, same_type, is_char

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Patrones
# -----------------------------------------------------------------------------

_ALL_CAPS_RE = re.compile(r"^[A-Z]+$")
_WORD_RE = re.compile(r"\w+")
_RELATIONAL_RE = re.compile(r"<=|>=")
_TEST_CONTEXT_RE = re.compile(r"\b(" + "|".join(TEST_KEYWORDS) + r")\b")
_ASSIGN_TARGET_RE = re.compile(rf"^({IDENTIFIER})\s*{ASSIGN}")
_CONSTANT_PATTERN_RE = re.compile(rf"^{IDENTIFIER}\s*=")
_USAGE_TOKEN_RE = re.compile(rf"\b{IDENTIFIER}\b")

_DECLARE_ARRAY_RE = re.compile(
    rf"DECLARE\s+({IDENTIFIER})\s*:\s*ARRAY\s*\[\s*(-?\d+)\s*:\s*(-?\d+)\s*\]", re.IGNORECASE
)
_DECLARE_CHAR_RE = re.compile(r"DECLARE\s+\w+\s*:\s*CHAR\b")
_CONSTANT_RE = re.compile(rf"CONSTANT\s+({IDENTIFIER})\s*=", re.IGNORECASE)
_FUNCTION_NAME_RE = re.compile(rf"FUNCTION\s+({IDENTIFIER})", re.IGNORECASE)
_PARAMS_RE = re.compile(r"(?:FUNCTION|PROCEDURE)\s+\w+\s*\((.*?)\)", re.IGNORECASE)
_RETURNS_RE = re.compile(r"\bRETURNS\b\s*(.*)$")
_CALL_RE = re.compile(rf"CALL\s+({IDENTIFIER})", re.IGNORECASE)
_OPENFILE_RE = re.compile(r"OPENFILE\s+\S+\s+FOR\s+(\w+)", re.IGNORECASE)
_ARRAY_ACCESS_RE = re.compile(rf"({IDENTIFIER})\[\s*(-?\d+)\s*\]")
_CHAR_LITERAL_RE = re.compile(r"'[^']*'")
_CHAR_STRING_ASSIGN_RE = re.compile(rf"({IDENTIFIER})\s*{ASSIGN}\s*\"[^\"]*\"")

# Lo que puede seguir a un identificador escrito en mayúsculas al inicio de línea
_IDENTIFIER_FOLLOWERS = (ASSIGN, "<-", "=", "[", "(", ".")

_PASSING_MODES = ("BYVAL", "BYREF")

LineRule = Callable[[SourceLine], None]


# -----------------------------------------------------------------------------
# Checker principal
# -----------------------------------------------------------------------------
class PseudocodeChecker:
    """
    Reglas implementadas (resumen):
      • Sangría en múltiplos de la unidad configurada (warning)
      • '=' en lugar de '←' fuera de CONSTANT y de condiciones
      • Forma de identificadores, palabras clave en mayúsculas,
        palabras de otros lenguajes, líneas no reconocidas
      • Pila de bloques IF/ENDIF, FOR/NEXT, WHILE/ENDWHILE, ...
      • DECLARE / CONSTANT / FUNCTION / PROCEDURE: tabla de símbolos
      • Uso de variables no declaradas, CALL sobre funciones,
        límites de arreglos, literales CHAR y cadenas sin cerrar
      • Forma de FOR, CASE OF, WHILE y OPENFILE

    Todo el estado es local a una llamada de `check`.
    """

    def __init__(self, config: Optional[CheckerConfig] = None) -> None:
        self.config = config or CheckerConfig()
        self._reset()
        self._line_rules: Tuple[LineRule, ...] = (
            self._check_indentation,
            self._check_assignment_operator,
            self._check_identifier_shape,
            self._check_line_structure,
            self._check_first_word,
            self._check_keyword_case,
            self._check_foreign_keywords,
            self._check_declare,
            self._check_constant,
            self._check_subprogram,
            self._check_for_shape,
            self._check_case_shape,
            self._check_while_shape,
            self._check_unclosed_string,
            self._check_char_literals,
            self._check_array_bounds,
            self._check_assignment_target,
            self._check_usage,
            self._check_call,
            self._check_openfile,
        )

    def _reset(self) -> None:
        self.diag = Diagnostics()
        self.symtab = SymbolTable()
        self.blocks = BlockStack()

    # --------------- helpers de reporte/resolución ---------------
    def _error(self, line: SourceLine, msg: str, code: str) -> None:
        self.diag.error(line.number, msg, code)

    def _warning(self, line: SourceLine, msg: str, code: str) -> None:
        self.diag.warning(line.number, msg, code)

    def _is_known(self, name: str) -> bool:
        return (
            self.symtab.is_declared(name)
            or self.symtab.is_function(name)
            or self.symtab.array(name) is not None
        )

    # ------------------------------ pasada completa ------------------------------
    def check(self, source: str) -> CheckResult:
        self._reset()
        scan = scan_source(source)

        if not scan.has_content():
            self.diag.error(1, "No pseudocode content found. Please write some pseudocode.", E_NO_CONTENT)
            return CheckResult(diagnostics=self.diag.items, symbols=[])

        for line in scan.lines:
            if not line.is_content:
                continue
            for rule in self._line_rules:
                rule(line)

        for frame in self.blocks.unclosed():
            self.diag.error(frame.line, unmatched_message(frame), E_BLOCK)

        run_sweeps(scan.lines, self.symtab, self.diag)

        unique = deduplicate(self.diag)
        logger.debug(
            "checked %d lines: %d diagnostics (%d before dedup), %d unclosed blocks",
            len(scan), len(unique), len(self.diag), len(self.blocks),
        )
        return CheckResult(diagnostics=unique, symbols=self.symtab.dump())

    # ------------------------------ reglas de estructura ------------------------------
    def _check_indentation(self, line: SourceLine) -> None:
        unit = self.config.indent_unit
        if line.indent % unit != 0:
            self._warning(line, f"Indentation should be multiples of {unit} spaces", W_INDENT)

    def _check_assignment_operator(self, line: SourceLine) -> None:
        if line.text.startswith("CONSTANT") or ASSIGN in line.text:
            return
        if "=" not in _RELATIONAL_RE.sub("", line.code):
            return
        # En condiciones '=' es comparación
        if _TEST_CONTEXT_RE.search(line.code):
            return
        self._error(line, f"Use {ASSIGN} for assignment instead of = (Cambridge rule)", E_ASSIGN_OP)

    def _check_identifier_shape(self, line: SourceLine) -> None:
        for token in _WORD_RE.findall(line.code):
            if token.upper() in KEYWORDS or token.isdigit():
                continue
            if token[0].isdigit():
                self._error(line, f"Identifier '{token}' cannot start with a number", E_IDENTIFIER)
            elif not STRICT_IDENTIFIER_RE.match(token):
                self._error(line, f"Identifier '{token}' contains invalid characters", E_IDENTIFIER)

    def _check_line_structure(self, line: SourceLine) -> None:
        valid = (
            any(w.upper() in KEYWORDS for w in line.words)
            or ASSIGN in line.text
            or _ASSIGN_TARGET_RE.match(line.text) is not None
            or _CONSTANT_PATTERN_RE.match(line.text) is not None
            or ":" in line.text
        )
        if not valid:
            self._error(
                line,
                "This line does not appear to be valid pseudocode. Use Cambridge keywords and proper syntax.",
                E_UNRECOGNIZED,
            )

    def _check_first_word(self, line: SourceLine) -> None:
        """
        Revisa la primera palabra en MAYÚSCULAS y mueve la pila de bloques.

        Una palabra en mayúsculas que no es palabra clave se acepta como
        identificador solo si ya es un símbolo conocido o si la sigue
        '←', '<-', '=', '[', '(' o '.'. Si no, se reporta
        "Unknown keyword: X", además del error de línea no reconocida
        cuando la línea no tiene ninguna palabra clave (p. ej. 'PRINT x').
        """
        first = line.first_word
        if not _ALL_CAPS_RE.match(first):
            return

        if first not in KEYWORDS:
            rest = line.text[len(first):].lstrip()
            if not rest.startswith(_IDENTIFIER_FOLLOWERS) and not self._is_known(first):
                self._error(line, f"Unknown keyword: {first}", E_UNKNOWN_KEYWORD)

        if is_opener(first):
            self.blocks.open(first, line.number)
        elif is_closer(first):
            _, msg = self.blocks.close(first, line.number)
            if msg:
                self._error(line, msg, E_BLOCK)

    def _check_keyword_case(self, line: SourceLine) -> None:
        for word in line.tokens():
            upper = word.upper()
            if upper in KEYWORDS and word != upper:
                self._error(line, f"Keyword '{word}' should be uppercase: '{upper}'", E_KEYWORD_CASE)

    def _check_foreign_keywords(self, line: SourceLine) -> None:
        for word in line.tokens():
            if word.upper() in FOREIGN_KEYWORDS:
                self._error(line, f"'{word}' is not a valid Cambridge pseudocode keyword", E_FOREIGN_KEYWORD)

    # ------------------------------ declaraciones ------------------------------
    def _check_declare(self, line: SourceLine) -> None:
        if not line.text.startswith("DECLARE"):
            return
        if ":" not in line.code:
            self._error(line, "DECLARE statement must specify variable type with colon (:)", E_DECLARATION)
        else:
            names, _, type_text = line.code[len("DECLARE"):].partition(":")
            type_text = normalize_type(type_text)
            for name in (n.strip() for n in names.split(",")):
                if not name or not IDENTIFIER_RE.match(name):
                    continue
                self._declare_variable(line, name, type_text)

        m = _DECLARE_ARRAY_RE.search(line.code)
        if m:
            self.symtab.declare_array(
                ArraySymbol(name=m.group(1), lower=int(m.group(2)), upper=int(m.group(3)), line=line.number)
            )

        if re.search(r"\bARRAY\b", line.code):
            if "[" not in line.code or "]" not in line.code:
                self._error(line, "ARRAY declaration must include index range in square brackets [start:end]", E_DECLARATION)
            if not re.search(r"\bOF\b", line.code):
                self._error(line, "ARRAY declaration must include OF keyword", E_DECLARATION)

        if _DECLARE_CHAR_RE.search(line.text) and '"' in line.text:
            self._error(line, "CHAR literals must use single quotes ('), not double quotes (\")", E_CHAR_LITERAL)

    def _declare_variable(self, line: SourceLine, name: str, type_text: str) -> None:
        if name.upper() in KEYWORDS:
            self._error(line, f"'{name}' is a reserved keyword and cannot be used as a variable name", E_RESERVED_NAME)
            return
        try:
            self.symtab.current.define(VariableSymbol(name=name, type=type_text, line=line.number))
        except KeyError:
            prev = self.symtab.current.resolve(name)
            if not same_type(prev.type, type_text):
                self._error(
                    line,
                    f"Variable '{name}' redeclared with different type. "
                    f"Previously declared as {prev.type} on line {prev.line}",
                    E_REDECLARED_TYPE,
                )
            else:
                self._warning(line, f"Variable '{name}' already declared on line {prev.line}", W_REDECLARED)

    def _check_constant(self, line: SourceLine) -> None:
        if not line.text.startswith("CONSTANT"):
            return
        if "=" not in line.text:
            self._error(line, "CONSTANT must be assigned a value using =", E_DECLARATION)
        if ASSIGN in line.text:
            self._error(line, f"CONSTANT declarations use = not {ASSIGN}", E_DECLARATION)

        m = _CONSTANT_RE.search(line.text)
        if m:
            self.symtab.current.bind(ConstantSymbol(name=m.group(1), type=CONSTANT, line=line.number))

    def _check_subprogram(self, line: SourceLine) -> None:
        first = line.first_word
        if first == "FUNCTION":
            returns = _RETURNS_RE.search(line.code)
            if not returns:
                self._error(line, "FUNCTION must specify return type with RETURNS", E_DECLARATION)
            m = _FUNCTION_NAME_RE.search(line.code)
            if m:
                self.symtab.declare_function(FunctionSymbol(
                    name=m.group(1),
                    type=normalize_type(returns.group(1)) if returns else "",
                    line=line.number,
                    params=self._bind_parameters(line),
                ))
                return
        if first in ("FUNCTION", "PROCEDURE"):
            self._bind_parameters(line)

    def _bind_parameters(self, line: SourceLine) -> List[ParamSymbol]:
        """Registra los parámetros `nombre : TIPO` para que el cuerpo pueda usarlos."""
        m = _PARAMS_RE.search(line.code)
        if not m or not m.group(1).strip():
            return []

        params: List[ParamSymbol] = []
        for param in m.group(1).split(","):
            parts = param.strip().split(":")
            if len(parts) != 2:
                continue
            words = parts[0].split()
            by_ref = False
            if len(words) == 2 and words[0].upper() in _PASSING_MODES:
                by_ref = words[0].upper() == "BYREF"
                words = words[1:]
            if len(words) != 1 or not IDENTIFIER_RE.match(words[0]):
                continue
            p = ParamSymbol(name=words[0], type=normalize_type(parts[1]), line=line.number, by_ref=by_ref)
            self.symtab.current.bind(p)
            params.append(p)
        return params

    # ------------------------------ forma de sentencias ------------------------------
    def _check_for_shape(self, line: SourceLine) -> None:
        if line.first_word != "FOR":
            return
        if ASSIGN not in line.text or not re.search(r"\bTO\b", line.code):
            self._error(line, f"FOR loop must use format: FOR variable {ASSIGN} start TO end", E_STATEMENT)

    def _check_case_shape(self, line: SourceLine) -> None:
        # Solo se revisan las líneas que ya empiezan con 'CASE OF'
        if not line.text.startswith("CASE OF"):
            return
        if not re.search(r"\bOF\b", line.code):
            self._error(line, "CASE statement must use format: CASE OF variable", E_STATEMENT)

    def _check_while_shape(self, line: SourceLine) -> None:
        if line.first_word == "WHILE" and "(" in line.code and ")" in line.code:
            self._error(line, "WHILE conditions should not use parentheses in Cambridge pseudocode", E_STATEMENT)

    def _check_openfile(self, line: SourceLine) -> None:
        if not line.text.startswith("OPENFILE"):
            return
        m = _OPENFILE_RE.search(line.text)
        modes = self.config.file_modes
        if m:
            mode = m.group(1).upper()
            if mode not in modes:
                self._error(
                    line, f"Invalid file mode '{mode}'. Valid modes are: {', '.join(modes)}", E_FILE_MODE
                )
        elif "FOR" in line.text:
            self._error(
                line, f"OPENFILE syntax should be: OPENFILE filename FOR mode ({'/'.join(modes)})", E_FILE_MODE
            )

    # ------------------------------ literales ------------------------------
    def _check_unclosed_string(self, line: SourceLine) -> None:
        if line.unclosed_string:
            self._error(line, "Unclosed string - missing closing quote", E_UNCLOSED_STRING)

    def _check_char_literals(self, line: SourceLine) -> None:
        for literal in _CHAR_LITERAL_RE.findall(strip_strings(line.text)):
            content = literal[1:-1]
            if not content:
                self._error(line, "Empty CHAR literal - CHAR must contain exactly one character", E_CHAR_LITERAL)
            elif len(content) > 1 and not content.startswith("\\"):
                self._error(line, "CHAR literal can only contain one character. Use double quotes for strings", E_CHAR_LITERAL)

        if ASSIGN in line.text:
            m = _CHAR_STRING_ASSIGN_RE.search(line.text)
            if m:
                sym = self.symtab.current.resolve(m.group(1))
                if sym is not None and is_char(sym.type):
                    self._error(
                        line,
                        f"CHAR variable '{m.group(1)}' must use single quotes (') for character literals, "
                        f"not double quotes (\")",
                        E_CHAR_LITERAL,
                    )

    # ------------------------------ usos ------------------------------
    def _check_array_bounds(self, line: SourceLine) -> None:
        for m in _ARRAY_ACCESS_RE.finditer(line.code):
            arr = self.symtab.array(m.group(1))
            index = int(m.group(2))
            if arr is not None and not arr.contains(index):
                self._error(
                    line,
                    f"Array index {index} is out of bounds. Array '{m.group(1)}' valid range is {arr.range_text}",
                    E_ARRAY_BOUNDS,
                )

    def _check_assignment_target(self, line: SourceLine) -> None:
        m = _ASSIGN_TARGET_RE.match(line.text)
        if m and not self.symtab.is_declared(m.group(1)):
            self._error(line, f"Variable '{m.group(1)}' must be declared before use", E_UNDECLARED)

    def _check_usage(self, line: SourceLine) -> None:
        # Con una cadena sin cerrar el texto restante no es fiable
        if line.unclosed_string:
            return
        if not any(trigger in line.code for trigger in USAGE_TRIGGERS):
            return

        code = line.code
        for m in _USAGE_TOKEN_RE.finditer(code):
            name = m.group(0)
            if name.upper() in KEYWORDS:
                continue
            if code[m.end():].lstrip().startswith("("):
                continue  # llamada, no variable
            if code[:m.start()].rstrip().endswith("."):
                continue  # campo de un registro
            if not self.symtab.is_declared(name):
                self._error(line, f"Variable '{name}' must be declared before use", E_UNDECLARED)

    def _check_call(self, line: SourceLine) -> None:
        if not line.text.startswith("CALL "):
            return
        m = _CALL_RE.search(line.text)
        if m and self.symtab.is_function(m.group(1)):
            self._error(
                line,
                f"CALL should not be used with functions. Use function calls directly: {m.group(1)}(...)",
                E_CALL_MISUSE,
            )


# -----------------------------------------------------------------------------
# API pública
# -----------------------------------------------------------------------------
def analyze(source: str, config: Optional[CheckerConfig] = None) -> CheckResult:
    """
    Analiza un programa completo y devuelve sus diagnósticos.

    Args:
        source: Texto fuente con líneas separadas por '\\n'.
        config: Configuración opcional (por defecto, reglas Cambridge 9618).

    Returns:
        CheckResult con los diagnósticos sin duplicados y el veredicto.
    """
    if not isinstance(source, str):
        raise CheckerError(f"El texto fuente debe ser str, no {type(source).__name__}")
    return PseudocodeChecker(config).check(source)
