from __future__ import annotations
import sys
import logging
from pathlib import Path

import streamlit as st

# --- Rutas/paths base ---
# Estructura esperada:
# repo_root/
#   ├─ src/
#   │   ├─ ide/app.py (este archivo)
#   │   ├─ lexing/
#   │   ├─ semantic/
#   │   └─ tests/samples/

SRC_DIR = Path(__file__).resolve().parent.parent  # .../src
REPO_ROOT = SRC_DIR.parent                        # .../repo

# Garantiza que los paquetes bajo src/ sean importables con `streamlit run`
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from lexing.shortcuts import SYMBOL_BUTTONS, apply_shortcuts
from semantic.checker import analyze
from semantic.config import CheckerConfig
from semantic.result import CheckResult
from ide.feedback import (
    decode_upload,
    diagnostic_rows,
    discover_samples,
    normalize_symbol_table,
    summary,
)

logger = logging.getLogger(__name__)

# ------------------ Estilos y theming ------------------
_DEF_CSS = """
<style>
  :root{
    --bg: #ffffff;      /* fondo blanco */
    --layer: #f5f7fa;   /* paneles gris claro */
    --ink: #1a1d29;     /* texto oscuro */
    --brand: #2563eb;   /* acento azul */
  }
  .stApp{ background: var(--bg); color: var(--ink); }
  [data-testid="stSidebar"]{ background: var(--layer) !important; border-right: 1px solid #e5e7eb; }
  [data-testid="stHeader"] { display: none; }
  [data-testid="stToolbar"] { display: none; }
  #MainMenu { visibility: hidden; }
  footer { visibility: hidden; }
  .block-container{ padding-top: 1rem !important; }
  h1,h2,h3,h4,h5,h6{ color: var(--ink) !important; }
  .stButton>button{
    background: var(--layer); color: var(--ink); border: 1px solid #d1d5db;
    transition: transform .06s ease-in-out;
  }
  .stButton>button:hover{ background: var(--brand); color: #fff; transform: translateY(-1px); }
  textarea { font-family: Consolas, Monaco, monospace !important; }
</style>
"""

DEFAULT_SNIPPET = (
    "// Cambridge Pseudocode IDE (9618 - 2026 Standards)\n"
    "// Write your pseudocode here using UPPERCASE keywords\n"
    "// Remember: Use ← for assignment, = only for CONSTANT\n"
    "\n"
    "PROCEDURE Example()\n"
    "   DECLARE message: STRING\n"
    "   DECLARE count: INTEGER\n"
    "\n"
    "   message ← \"Hello, Cambridge!\"\n"
    "   count ← 5\n"
    "\n"
    "   OUTPUT \"Message: \", message\n"
    "   OUTPUT \"Count: \", count\n"
    "ENDPROCEDURE\n"
)

CLEAR_SNIPPET = "// Write your pseudocode here\n// Use UPPERCASE for all keywords\n\n"

CONFIG = CheckerConfig()


@st.cache_data(show_spinner=False)
def load_samples() -> dict[str, str]:
    return discover_samples([SRC_DIR / "tests" / "samples", REPO_ROOT / "examples"])


def run_check(code: str, auto_replace: bool) -> tuple[str, CheckResult]:
    if auto_replace:
        code = apply_shortcuts(code, CONFIG.shortcuts)
    return code, analyze(code, CONFIG)


# ------------------ Estado y configuración ------------------
st.set_page_config(
    page_title="Cambridge Pseudocode IDE",
    page_icon="📝",
    layout="wide",
    initial_sidebar_state="expanded",
)
st.markdown(_DEF_CSS, unsafe_allow_html=True)

st.session_state.setdefault("code", DEFAULT_SNIPPET)
st.session_state.setdefault("console", "")
st.session_state.setdefault("editor_key", 0)
st.session_state.setdefault("last_result", None)

# ------------------ Sidebar ------------------
with st.sidebar:
    st.markdown("### 📁 Proyecto")

    uploaded = st.file_uploader(
        "Subir archivo",
        type=["pseudo", "pse", "txt"],
        accept_multiple_files=False,
        key="uploader",
    )
    if uploaded is not None and st.session_state.get("uploaded_name") != uploaded.name:
        st.session_state.code = decode_upload(uploaded.getvalue())
        st.session_state.console += f"📄 Cargado: {uploaded.name}\n"
        st.session_state.editor_key += 1
        st.session_state["_force_check"] = True
        st.session_state["uploaded_name"] = uploaded.name

    samples = load_samples()
    choice = st.selectbox("Ejemplos", ["(ninguno)"] + sorted(samples.keys()))
    if choice != "(ninguno)" and st.session_state.get("_example_name") != choice:
        st.session_state.code = samples[choice]
        st.session_state.console += f"📦 Ejemplo cargado: {choice}\n"
        st.session_state.editor_key += 1
        st.session_state["_force_check"] = True
        st.session_state["_example_name"] = choice

    st.markdown("---")
    with st.expander("⚙️ Preferencias", expanded=True):
        auto_check = st.checkbox("Verificación automática", value=False)
        auto_replace = st.checkbox("Reemplazo automático (<-- → ←, != → ≠, <= → ≤, >= → ≥)", value=True)
        show_symbols = st.checkbox("Ver tabla de símbolos", value=True)

    st.markdown("---")
    st.caption("Cambridge Pseudocode IDE • Streamlit • AS & A Level (9618)")

# ------------------ Editor ------------------
st.markdown("## 📝 Editor")

# Barra de símbolos: agrega el símbolo al final del texto
cols = st.columns(len(SYMBOL_BUTTONS) + 4)
for col, symbol in zip(cols, SYMBOL_BUTTONS):
    if col.button(symbol, key=f"sym_{symbol}", use_container_width=True):
        st.session_state.code += symbol
        st.session_state.editor_key += 1

code = st.text_area(
    "Código fuente",
    value=st.session_state.code,
    height=360,
    key=f"editor_{st.session_state.editor_key}",
)
st.session_state.code = code

col1, col2, col3, _ = st.columns([1, 1, 1, 5])
run_now = col1.button("▶️ Check Syntax", use_container_width=True)
if col2.button("🗑️ Clear", use_container_width=True):
    st.session_state.code = CLEAR_SNIPPET
    st.session_state.last_result = None
    st.session_state.editor_key += 1
    st.rerun()
if col3.button("🧹 Limpiar salida", use_container_width=True):
    st.session_state.console = ""

run_now = run_now or st.session_state.pop("_force_check", False)

# ------------------ Pipeline: verificación ------------------
if run_now or (auto_check and st.session_state.code.strip()):
    try:
        checked_code, result = run_check(st.session_state.code, auto_replace)
        if checked_code != st.session_state.code:
            st.session_state.code = checked_code
            st.session_state.editor_key += 1
            st.session_state.console += "🔁 Atajos reemplazados por símbolos.\n"
        st.session_state.last_result = result
        if result.is_valid:
            st.session_state.console += f"✅ Verificación sin errores ({len(result.warnings)} advertencias).\n"
        else:
            st.session_state.console += f"❌ Errores: {len(result.errors)}, advertencias: {len(result.warnings)}\n"
    except Exception as ex:
        logger.exception("Fallo inesperado del checker")
        st.session_state.last_result = None
        st.session_state.console += f"💥 Excepción: {ex}\n"

# ------------------ Consola ------------------
st.markdown("## 🖥️ Salida")
st.code(st.session_state.console or "// La salida aparecerá aquí...", language="bash")

# ------------------ Resultados ------------------
st.markdown("## 📊 Resultados")
result: CheckResult | None = st.session_state.last_result

if result is None:
    st.info("Ejecuta la verificación para ver resultados.")
else:
    info = summary(result)
    if info["valid"]:
        st.success(f"✅ {info['title']}")
    else:
        st.error(f"❌ {info['title']}")

    c1, c2 = st.columns(2)
    c1.metric("Errores", info["errors"])
    c2.metric("Advertencias", info["warnings"])

    rows = diagnostic_rows(result)
    if rows:
        st.dataframe(
            rows,
            use_container_width=True,
            hide_index=True,
            column_config={
                "#": st.column_config.NumberColumn(width="small"),
                "Línea": st.column_config.NumberColumn(width="small"),
                "Tipo": st.column_config.TextColumn(width="small"),
                "Código": st.column_config.TextColumn(width="small"),
            },
        )

    if show_symbols and result.symbols:
        with st.expander("📚 Tabla de símbolos", expanded=True):
            flat = normalize_symbol_table(result.symbols)
            if flat:
                st.dataframe(flat, use_container_width=True, hide_index=True)
                if st.toggle("Ver JSON crudo", value=False):
                    st.json(result.symbols)
            else:
                st.info("No hay símbolos para mostrar.")
