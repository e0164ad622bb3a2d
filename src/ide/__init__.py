"""Editor Streamlit para practicar pseudocódigo Cambridge."""
