import logging
import os

from .errors import FileNotFound, RecursiveInclude

logger = logging.getLogger(__name__)

class IncludeResolver:
    """Finds and loads #include targets, refusing cyclic include chains.

    include_stack holds the canonical paths of the files currently being
    processed (the ancestors of the current file). It is not a cache: the same
    file reached through two unrelated branches is loaded and processed twice.
    """

    def __init__(self, include_path="."):
        self.include_path = include_path or "."
        self.include_stack = set()

    def reset(self):
        self.include_stack = set()

    def full_path(self, filename):
        return os.path.join(self.include_path, filename)

    def canonical(self, path):
        return os.path.realpath(path)

    def load(self, path):
        try:
            with open(path, 'r', encoding='utf-8', errors='replace') as f:
                return f.read()
        except OSError as e:
            raise FileNotFound(f"Could not open file: {path} ({e.strerror or e})") from e

    def include(self, filename, process):
        """Resolves `filename` against the include path and processes it."""
        path = self.full_path(filename)
        logger.debug("Including file: %s", path)
        return self.process_path(path, process)

    def process_path(self, path, process):
        """Loads `path` and hands its content to `process(content, path)`."""
        key = self.canonical(path)
        if key in self.include_stack:
            raise RecursiveInclude(f"Recursive include: {path}")

        content = self.load(path)
        self.include_stack.add(key)
        try:
            return process(content, path)
        finally:
            self.include_stack.discard(key)
