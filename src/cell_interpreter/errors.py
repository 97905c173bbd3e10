class FormulaError(Exception):
    """Base class for every error raised by the formula engine."""


class TokenizerError(FormulaError):
    pass


class CommaNotAllowed(TokenizerError):
    pass


class InvalidCharacters(TokenizerError):
    pass


class FunctionRequiresParens(TokenizerError):
    pass


class ParseError(FormulaError):
    pass


class MismatchedParentheses(ParseError):
    pass


class EvaluationError(FormulaError):
    pass


class MissingOperand(EvaluationError):
    pass


class MissingOperands(EvaluationError):
    pass


class InvalidExpression(EvaluationError):
    pass


class DivideByZero(EvaluationError):
    pass


class CommaInCell(EvaluationError):
    pass


class NumberOutOfRange(EvaluationError):
    """A result could not be represented in the decimal context."""


class CoercionError(FormulaError):
    pass


class NotANumber(CoercionError):
    pass


class CellReferenceError(FormulaError):
    pass


class InvalidCellReference(CellReferenceError):
    pass


class CellOutOfBounds(CellReferenceError):
    pass


class CycleError(FormulaError):
    pass


class CycleDetected(CycleError):
    """A cell was reached again while it was still being resolved."""

    def __init__(self, path: tuple[str, ...]):
        self.path = path
        super().__init__(f"Detected cycle: {' -> '.join(path)}")


class ChainTooLong(CycleError):
    """The reference chain exceeded the interpreter's configured limit."""

    def __init__(self, path: tuple[str, ...], limit: int):
        self.path = path
        self.limit = limit
        super().__init__(
            f"Reference chain longer than {limit} cells (starting at {path[0]})"
        )


class StorageError(Exception):
    pass
