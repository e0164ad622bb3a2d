# src/cli.py
import argparse
import json
import logging
import sys
from pathlib import Path

from lexing.shortcuts import apply_shortcuts
from semantic.checker import analyze
from semantic.config import CheckerConfig, load_config
from semantic.errors import CheckerError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_INVALID = 2


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pseudocheck",
        description="Verifica pseudocódigo Cambridge 9618 y muestra los diagnósticos.",
    )
    parser.add_argument("file", help="Archivo de pseudocódigo (.pseudo, .txt)")
    parser.add_argument("--json", action="store_true", help="Imprime el resultado como JSON")
    parser.add_argument("--auto-replace", action="store_true", help="Aplica los atajos (<--, !=, <=, >=) antes de verificar")
    parser.add_argument("--config", metavar="FILE", help="Archivo JSON de configuración")
    parser.add_argument("--symbols", action="store_true", help="Muestra la tabla de símbolos")
    parser.add_argument("-v", "--verbose", action="store_true", help="Activa el log de depuración")
    return parser


def read_source(path: str, config: CheckerConfig, auto_replace: bool) -> str:
    """
    Lee el archivo fuente en UTF-8.

    Args:
        path (str): Ruta al archivo de pseudocódigo.
        config (CheckerConfig): Configuración con la tabla de atajos.
        auto_replace (bool): Si es True aplica los atajos del editor.

    Returns:
        str: Texto listo para el checker.
    """
    code = Path(path).read_text(encoding="utf-8")
    if auto_replace:
        code = apply_shortcuts(code, config.shortcuts)
    return code


def print_report(result, show_symbols: bool = False) -> None:
    if show_symbols:
        print("=== Tabla de Símbolos ===")
        for scope in result.symbols:
            for entry in scope["entries"]:
                print(f"{scope['scope']}: {entry['name']} ({entry['kind']}) : {entry['type']}  [línea {entry['line']}]")
        print()

    print("=== Diagnósticos ===")
    if not result.diagnostics:
        print("No se encontraron errores ✅")
        return
    for d in sorted(result.diagnostics, key=lambda d: d.line):
        print(f"línea {d.line} [{d.severity}] {d.code}: {d.message}")

    print()
    if result.is_valid:
        print(f"✔ Programa válido ({len(result.warnings)} advertencias)")
    else:
        print(f"✘ {len(result.errors)} errores, {len(result.warnings)} advertencias")


def execute_cli(argv=None) -> int:
    """
    Punto de entrada de la línea de comandos.

    1. Lee el archivo (y la configuración, si se indica).
    2. Ejecuta `analyze` sobre el texto.
    3. Muestra el reporte en texto o JSON.

    Devuelve 0 si el programa es válido, 2 si tiene errores y 1 ante
    problemas de uso (archivo o configuración ilegibles).
    """
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config) if args.config else CheckerConfig()
        code = read_source(args.file, config, args.auto_replace)
        result = analyze(code, config)
    except CheckerError as ex:
        print(f"Error: {ex}", file=sys.stderr)
        return EXIT_USAGE
    except (OSError, UnicodeDecodeError) as ex:
        print(f"No se pudo leer {args.file}: {ex}", file=sys.stderr)
        return EXIT_USAGE

    logger.debug("%s: %d diagnósticos", args.file, len(result.diagnostics))

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(f"Procesando archivo {args.file}...\n")
        print_report(result, show_symbols=args.symbols)

    return EXIT_OK if result.is_valid else EXIT_INVALID


def main() -> None:
    sys.exit(execute_cli())


if __name__ == "__main__":
    main()
