class PadPoolError(Exception):
    """Base class for every error raised by padpool."""


class CreationError(PadPoolError):
    def __init__(self, identifier: str, reason: str):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Could not create pool '{identifier}': {reason}")


class DeleteError(PadPoolError):
    def __init__(self, identifier: str, reason: str):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Could not delete pool '{identifier}': {reason}")


class PoolNotFoundError(PadPoolError):
    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Pool '{identifier}' not found. Data may not exist or has expired.")


class EncodeError(PadPoolError):
    def __init__(self, byte: int, index: int):
        self.byte = byte
        self.index = index
        super().__init__(f"Byte value {byte} (at index {index}) not found in pool. Cannot generate key.")


class DecodeError(PadPoolError):
    def __init__(self, position: int, index: int):
        self.position = position
        self.index = index
        super().__init__(
            f"Invalid position ({position}) found in key at index {index}. "
            "It's outside the bounds of the pool."
        )


class KeyFormatError(PadPoolError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid key file format: {reason}")
