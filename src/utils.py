"""Utility functions for the application."""

# True while the last message was printed in place and the line is not terminated yet
_line_open = False


def _emit(text: str, end: str = "\n") -> None:
    """Prints text, falling back to an ASCII rendering on consoles that cannot encode it."""
    try:
        print(text, end=end, flush=True)
    except UnicodeEncodeError:
        print(text.encode("ascii", errors="replace").decode("ascii"), end=end, flush=True)


def log(message: str, indent: int = 0, top: int = 0, bottom: int = 0, carriage_return: bool = False) -> None:
    """
    Custom print function that supports indentation, padding, and optional carriage return.

    A message printed with carriage_return stays on its line, so the next in-place message
    overwrites it. The next regular message starts on a new line.

    Args:
        message: The message to print.
        indent: Number of indentation units (2 spaces each).
        top: Number of empty lines to print before the message.
        bottom: Number of empty lines to print after the message.
        carriage_return: If True, prepends '\r' to the message for in-place updates.
    """
    global _line_open

    if _line_open and not carriage_return:
        _emit("")
        _line_open = False

    if top > 0:
        _emit("\n" * (top - 1))

    output_message = f"{'  ' * indent}{message}"

    if carriage_return:
        _emit(f"\r{output_message}", end="")
        _line_open = True
    else:
        _emit(output_message)

    if bottom > 0:
        _emit("\n" * (bottom - 1))
