import json

from .errors import ConfigError
from .macros import parse_macro

class Config:
    def __init__(self, include_path=".", macros=None):
        self.include_path = include_path or "."
        self.macros = []  # "NAME" / "NAME=VALUE" strings, applied as global options
        for text in macros or []:
            self.add_define(text)

    def add_define(self, text):
        """Adds a single 'NAME' or 'NAME=VALUE' definition."""
        parse_macro(text)
        self.macros.append(text.strip())

    def parse_defines(self, define_str):
        """Parses a string like 'WORKGROUP_SIZE=64,USE_F16' into macro definitions."""
        if not define_str:
            return

        for pair in define_str.split(','):
            if pair.strip():
                self.add_define(pair)

    def load_config(self, filepath):
        """Merges a JSON file holding 'include_path' and/or 'defines'."""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigError(f"Could not open config file: {filepath} ({e.strerror or e})") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {filepath} must contain a JSON object")

        if "include_path" in data:
            if not isinstance(data["include_path"], str):
                raise ConfigError(f"'include_path' in {filepath} must be a string")
            self.include_path = data["include_path"] or "."

        # Defines may be a list or the comma-separated command line form
        defines = data.get("defines", [])
        if isinstance(defines, str):
            self.parse_defines(defines)
        elif isinstance(defines, list):
            for text in defines:
                if not isinstance(text, str):
                    raise ConfigError(f"Entries of 'defines' in {filepath} must be strings")
                self.add_define(text)
        else:
            raise ConfigError(f"'defines' in {filepath} must be a list or a string")
