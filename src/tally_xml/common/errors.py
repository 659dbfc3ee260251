from __future__ import annotations


class TallyXmlError(Exception):
    """Base class for every error raised by tally_xml."""


class InputValidationError(TallyXmlError):
    """Input JSON failed shape validation.

    ``errors`` holds one human-readable line per problem, so callers can show
    all of them at once, fix the input and retry.
    """

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("JSON validation failed:\n" + "\n".join(self.errors))


class StructuralSerializationError(TallyXmlError):
    """A document key cannot be rendered as an XML element name.

    This points at a defect in whatever assembled the document, not at user
    input. Nothing is emitted when it is raised.
    """

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"cannot render element name {key!r}: {reason}")
