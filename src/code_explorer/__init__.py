"""Top-level package for Code Explorer stacks.

Provides subpackages:
- code_explorer.core – Marker/Stack models and the error taxonomy
- code_explorer.outline – outline-text codec and predecessor lookups
- code_explorer.editing – indent and reorder engines
- code_explorer.store – scope context, store facade and persistence backends
- code_explorer.view – tree projection, drag and drop, command handlers
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    # Fallback to importlib.metadata for installed package
    try:
        from importlib.metadata import version as pkg_version
        return pkg_version("code-explorer-stacks")
    except Exception:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
