"""Protocol-wide constants shared by listener and dialer."""

ENCODING = "utf-8"
HEADER_WIDTH = 3  # zero-padded decimal digits
TERMINATOR = b"\0"
MAX_HEADER_VALUE = 10**HEADER_WIDTH - 1
MAX_MESSAGE_LEN = 500  # characters a user may compose
MAX_HANDLE_LEN = 10
MAX_FRAME_BODY = 515  # 516-byte buffer minus the terminator
HANDLE_SEPARATOR = "> "
HANDLE_PATTERN = r"^[A-Za-z0-9_]+$"
QUIT_SENTINEL = "\\quit"

__all__ = [
    "ENCODING",
    "HEADER_WIDTH",
    "TERMINATOR",
    "MAX_HEADER_VALUE",
    "MAX_MESSAGE_LEN",
    "MAX_HANDLE_LEN",
    "MAX_FRAME_BODY",
    "HANDLE_SEPARATOR",
    "HANDLE_PATTERN",
    "QUIT_SENTINEL",
]
