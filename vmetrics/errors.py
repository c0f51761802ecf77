"""Error kinds raised or collected while editing and transcoding fonts.

Fatal errors are raised and end the run. Non-fatal ones are instantiated and
collected as issues on the result, then reported as warnings.
"""


class FontMetricsError(Exception):
    kind = "FontMetricsError"
    fatal = True

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message or self.kind


class InputNotFound(FontMetricsError):
    kind = "InputNotFound"


class UnsupportedFormat(FontMetricsError):
    kind = "UnsupportedFormat"


class ContainerMalformed(FontMetricsError):
    kind = "ContainerMalformed"


class TranscodeFailed(FontMetricsError):
    kind = "TranscodeFailed"


class MetricOutOfRange(FontMetricsError):
    kind = "MetricOutOfRange"

    def __init__(self, message: str = "", field: str = "", value=None):
        super().__init__(message)
        self.field = field
        self.value = value


class SerializationFailed(FontMetricsError):
    kind = "SerializationFailed"


class PatchTargetNotFound(FontMetricsError):
    kind = "PatchTargetNotFound"
    fatal = False


class VerificationFailed(FontMetricsError):
    kind = "VerificationFailed"
    fatal = False


class MissingTable(FontMetricsError):
    kind = "MissingTable"
    fatal = False

    def __init__(self, message: str = "", tag: str = ""):
        super().__init__(message)
        self.tag = tag
