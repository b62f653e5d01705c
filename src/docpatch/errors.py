"""Error taxonomy for the patch pipeline; every stage raises one of these"""


class DocPatchError(Exception):
    """Base class for pipeline failures that are reported back to the requester."""
    prefix = "Request failed"

    @property
    def user_message(self) -> str:
        """Short, human-readable message for the callback channel."""
        detail = str(self)
        return f"{self.prefix}: {detail}" if detail else self.prefix


class InvalidInput(DocPatchError):
    prefix = "Invalid request"


class NotFound(DocPatchError):
    prefix = "Document not found"


class NoCloseMatch(DocPatchError):
    prefix = "No close match"


class SectionNotFound(DocPatchError):
    prefix = "Section not found"


class MissingIndicator(SectionNotFound, InvalidInput):
    """No backtick-quoted section indicator in the issue text (strict mode)."""
    prefix = "No section indicator"


class UpstreamUnavailable(DocPatchError):
    prefix = "Upstream service unavailable"


class EmptySuggestion(DocPatchError):
    prefix = "No usable suggestion"


class Conflict(DocPatchError):
    prefix = "Document changed while editing"
