"""The exemplar fel4.toml shipped with the package."""

from pathlib import Path

# Built-in data directory (ships with the package)
_BUILTIN_DATA_DIR = Path(__file__).parent / "data"

EXEMPLAR_MANIFEST_PATH = _BUILTIN_DATA_DIR / "fel4.toml"


def get_exemplar_default_toml() -> str:
    """Return the text of a complete, resolvable fel4.toml covering every supported target."""
    return EXEMPLAR_MANIFEST_PATH.read_text(encoding="utf-8")
