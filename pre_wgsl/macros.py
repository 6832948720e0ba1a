import logging
import re
from enum import IntEnum

from .errors import ConfigError

logger = logging.getLogger(__name__)

IDENTIFIER_PAT = re.compile(r'[A-Za-z_][A-Za-z0-9_]*\Z', re.ASCII)

class Precedence(IntEnum):
    # Higher value wins
    FILE_DEFINE = 0
    GLOBAL_OPTION = 1
    PER_INVOCATION = 2

def parse_macro(text):
    """Parses 'NAME' or 'NAME=VALUE' into a (name, value) pair.

    Splits on the first '=' and trims both halves independently. Without an
    '=' the result is a flag macro with an empty value.
    """
    if '=' in text:
        name, value = text.split('=', 1)
        name, value = name.strip(), value.strip()
    else:
        name, value = text.strip(), ''

    if not IDENTIFIER_PAT.match(name):
        raise ConfigError(f"Invalid macro name in definition '{text}'")
    return name, value

class MacroTable:
    """Macro name -> raw value bindings, one layer per precedence level.

    A lookup sees the value of the highest layer holding the name, so each
    name has exactly one effective entry. Values are stored verbatim and never
    expanded against other macros.
    """

    def __init__(self):
        self.layers = {level: {} for level in Precedence}

    def define(self, name, value='', precedence=Precedence.FILE_DEFINE):
        """Inserts or updates a binding. Returns False if a higher layer locks the name."""
        for level in Precedence:
            if level > precedence and name in self.layers[level]:
                logger.debug("Ignoring %s for %s: locked at %s", precedence.name, name, level.name)
                return False

        self.layers[precedence][name] = value
        return True

    def define_all(self, definitions, precedence):
        for text in definitions or []:
            name, value = parse_macro(text)
            self.define(name, value, precedence)

    def lookup(self, name):
        for level in sorted(Precedence, reverse=True):
            layer = self.layers[level]
            if name in layer:
                return layer[name]
        return None

    def defined(self, name):
        return any(name in layer for layer in self.layers.values())

    def __contains__(self, name):
        return self.defined(name)

    def clear(self, precedence):
        self.layers[precedence].clear()

    def reset_run(self):
        # Only the caller-seeded global layer survives between runs
        self.clear(Precedence.FILE_DEFINE)
        self.clear(Precedence.PER_INVOCATION)

    def as_dict(self):
        merged = {}
        for level in Precedence:
            merged.update(self.layers[level])
        return merged
