"""Error taxonomy shared by the assistant service and the API controllers."""


class EditZenError(Exception):
    """Base class for assistant failures."""


class ValidationError(EditZenError):
    """A request field is missing or malformed.

    The message is safe to show to the caller.
    """


class ParseError(EditZenError):
    """The model output did not contain the expected structured data."""


class UpstreamError(EditZenError):
    """The image fetch or the model call failed."""
