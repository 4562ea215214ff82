"""Config file loading for consolelog."""

from pathlib import Path

CONFIG_DIR = Path.home() / ".config" / "consolelog"
CONFIG_FILE = CONFIG_DIR / "config.toml"


def load_config_file(path: Path | None = None) -> dict:
    """Read config from TOML file, return flat dict."""
    path = path or CONFIG_FILE
    if not path.exists():
        return {}

    import tomllib

    with open(path, "rb") as f:
        data = tomllib.load(f)

    # Flatten sections one level deep: [console] root = "..." -> {"root": "..."}
    flat: dict = {}
    for section_key, section_data in data.items():
        if isinstance(section_data, dict):
            for k, v in section_data.items():
                flat[k] = v
        else:
            flat[section_key] = section_data
    return flat
