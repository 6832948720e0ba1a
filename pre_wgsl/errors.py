class PreprocessorError(RuntimeError):
    """Base class for every failure raised while preprocessing."""
    kind = "PreprocessorError"

    def __init__(self, message, filename=None, line=None):
        self.message = message
        self.filename = filename
        self.line = line
        super().__init__(self.__str__())

    def __str__(self):
        if self.filename and self.line:
            return f"{self.filename}:{self.line}: {self.message}"
        if self.filename:
            return f"{self.filename}: {self.message}"
        if self.line:
            return f"line {self.line}: {self.message}"
        return self.message

    def locate(self, filename, line):
        # Only the innermost location is kept
        if self.line is None:
            self.filename = filename
            self.line = line
            self.args = (self.__str__(),)
        return self


class FileNotFound(PreprocessorError):
    kind = "FileNotFound"


class RecursiveInclude(PreprocessorError):
    kind = "RecursiveInclude"


class UnknownDirective(PreprocessorError):
    kind = "UnknownDirective"


class UnclosedConditional(PreprocessorError):
    kind = "UnclosedConditional"


class DanglingElifOrElse(PreprocessorError):
    kind = "DanglingElifOrElse"


class MalformedExpression(PreprocessorError):
    kind = "MalformedExpression"


class MalformedDirective(PreprocessorError):
    kind = "MalformedDirective"


class ConfigError(PreprocessorError):
    kind = "ConfigError"
