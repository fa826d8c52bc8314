class CompilationError(Exception):
    pass


class SourceReadError(CompilationError):
    def __init__(self, source_name: str, reason: str = ""):
        self.source_name = source_name
        self.reason = reason
        msg = f"Cannot read source '{source_name}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class MalformedRowError(CompilationError):
    def __init__(self, source_name: str, row: int, reason: str = "unterminated quoted field"):
        self.source_name = source_name
        self.row = row
        self.reason = reason
        super().__init__(f"{source_name}, row {row}: {reason}")


class EmptyInputError(CompilationError):
    def __init__(self, msg: str = "No CSV files supplied"):
        super().__init__(msg)
