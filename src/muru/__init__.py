"""The muru compiler: a tiny functional language lowered to WebAssembly."""

__version__ = "0.1.0"
