from __future__ import annotations


class MalformedReference(ValueError):
    """Cell reference that does not match letters-then-digits A1 notation."""

    kind = "cell"

    def __init__(self, ref: object, reason: str | None = None) -> None:
        message = f"Invalid {self.kind} reference: {ref!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.ref = ref


class MalformedRange(MalformedReference):
    """Range reference without exactly one ':' separator."""

    kind = "range"


class ExbookError(Exception):
    """Base class for workbook session and backend errors."""


class NoWorkbooksOpenError(ExbookError):
    """Raised when an operation needs at least one open workbook."""

    def __init__(self) -> None:
        super().__init__("No workbooks open.")


class NoActiveWorkbookError(ExbookError):
    """Raised when an operation needs a selected workbook."""

    def __init__(self, action: str = "select") -> None:
        super().__init__(f"No workbook selected to {action}.")
        self.action = action


class NoActiveSheetError(ExbookError):
    """Raised when an operation needs a selected sheet."""

    def __init__(self) -> None:
        super().__init__("No active sheet selected.")


class WorkbookNotOpenError(ExbookError, KeyError):
    """Raised when a named workbook is not loaded in the session."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Workbook not open: {name}")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class WorkbookExistsError(ExbookError):
    """Raised when a workbook name is already loaded in the session."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Workbook already open: {name}")
        self.name = name


class SheetNotFoundError(ExbookError, KeyError):
    """Raised when a sheet does not exist in a workbook."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Sheet not found: {name}")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class SheetExistsError(ExbookError):
    """Raised when adding a sheet whose name is taken."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Sheet already exists: {name}")
        self.name = name


class WorkbookParseError(ExbookError):
    """Raised when the backend cannot read a workbook file."""


class WorkbookWriteError(ExbookError):
    """Raised when the backend cannot write a workbook file."""
