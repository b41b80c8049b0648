"""Errors - Failures of the move and size workflows"""

from .models import Answer


class MoveError(Exception):
    """
    Base class of workflow failures.

    `message` is the fixed human readable text sent as Message, `detail` the
    underlying error text sent as Body.
    """

    message = "Move error."

    def __init__(self, detail: str = ""):
        super().__init__(f"{self.message} {detail}".strip())
        self.detail = detail

    def to_answer(self) -> Answer:
        return Answer(message=self.message, body=self.detail)


class DecodeError(MoveError):
    message = "Decoding params error."


class SourceNotFoundError(MoveError):
    message = "Src directory not exist."


class DestinationExistsError(MoveError):
    message = "Dst directory already exists."


class DestinationRemovalError(MoveError):
    message = "Remove dst directory error."


class TempCleanupError(MoveError):
    message = "Remove tmp directory error."


class CopyError(MoveError):
    message = "Copy error. Can not copy src directory"


class RollbackError(CopyError):
    """Copy failed and the partial destination could not be deleted"""

    message = "Copy error. Can not delete dst directory"


class VerificationError(MoveError):
    message = "Verify error. Copied tree does not match src directory"


class PostCopyCleanupError(MoveError):
    """Destination is complete but the source could not be deleted"""

    message = "Remove error. Can not remove src directory after copying"


class SizeError(MoveError):
    message = "Directory size error."
