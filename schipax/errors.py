"""Errors raised while preparing a program image."""


class Chip8Error(Exception):
    """Base class for interpreter errors."""


class ImageUnreadable(Chip8Error):
    """The program image could not be read from its source."""


class ImageTooLarge(Chip8Error):
    """The program image does not fit between the entry offset and the end of memory."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Program image of {size} bytes exceeds the {limit} bytes available")
        self.size = size
        self.limit = limit
