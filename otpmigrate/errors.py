from __future__ import annotations


class MigrationDecodeError(ValueError):
    """Base class for otpauth-migration decoding errors."""


class TruncatedInput(MigrationDecodeError):
    pass


class UnsupportedWireType(MigrationDecodeError):
    def __init__(self, wire_type: int):
        super().__init__(f"Unsupported wire type: {wire_type}")
        self.wire_type = wire_type


class UnknownEnumIndex(MigrationDecodeError):
    def __init__(self, enum_name: str, index: int):
        super().__init__(f"Unknown {enum_name} index: {index}")
        self.enum_name = enum_name
        self.index = index


# Raised by the URL adapter only; the payload decoder never sees transport framing.
class MalformedTransport(MigrationDecodeError):
    pass
