from __future__ import annotations
import contextlib
from pathlib import Path
from typing import Any, Iterable

from semantic.result import CheckResult

SAMPLE_SUFFIXES = {".pseudo", ".pse", ".txt"}


def decode_upload(b: bytes) -> str:
    """Decodifica un archivo subido probando UTF-8 y luego latin-1."""
    for enc in ("utf-8", "latin-1"):
        with contextlib.suppress(UnicodeDecodeError):
            return b.decode(enc)
    return b.decode("utf-8", errors="replace")


def discover_samples(roots: Iterable[Path]) -> dict[str, str]:
    """Escanea los directorios de ejemplo y devuelve {ruta_visible: contenido}."""
    out: dict[str, str] = {}
    for root in roots:
        if not root.exists():
            continue
        for p in sorted(root.glob("*")):
            if not p.is_file() or p.suffix.lower() not in SAMPLE_SUFFIXES:
                continue
            with contextlib.suppress(OSError, UnicodeDecodeError):
                out[f"{root.name}/{p.name}"] = p.read_text(encoding="utf-8")
    return out


def diagnostic_rows(result: CheckResult) -> list[dict[str, Any]]:
    """Filas para la tabla de diagnósticos, ordenadas por línea (errores primero)."""
    ordered = sorted(result.diagnostics, key=lambda d: (d.line, d.severity != "error"))
    return [
        {
            "#": i,
            "Línea": d.line,
            "Tipo": "Error" if d.is_error else "Advertencia",
            "Código": d.code or "-",
            "Mensaje": d.message,
        }
        for i, d in enumerate(ordered, 1)
    ]


def summary(result: CheckResult) -> dict[str, Any]:
    n_err, n_warn = len(result.errors), len(result.warnings)
    if result.is_valid:
        title = "Syntax Check Passed!"
    else:
        title = "Syntax Errors Found"
    return {"valid": result.is_valid, "title": title, "errors": n_err, "warnings": n_warn}


def normalize_symbol_table(payload: Any) -> list[dict[str, str]]:
    """Aplana la tabla de símbolos devuelta por el checker a filas tabulares."""
    scopes = payload if isinstance(payload, list) else [payload]
    rows: list[dict[str, str]] = []
    for sc in scopes:
        scope = sc.get("scope", "") if isinstance(sc, dict) else ""
        entries = sc.get("entries", []) if isinstance(sc, dict) else []
        for e in entries:
            etype = e.get("type") if isinstance(e, dict) else ""
            rows.append({
                "scope": scope,
                "name": e.get("name", ""),
                "kind": e.get("kind", ""),
                "type": str(etype),
                "line": str(e.get("line", "")),
            })
    return rows
