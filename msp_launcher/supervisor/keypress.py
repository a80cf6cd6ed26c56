import sys


def wait_for_keypress() -> None:
    """Blocks until a single key is pressed. Which key does not matter."""
    if sys.platform == "win32":
        import msvcrt
        msvcrt.getch()
        return

    if not sys.stdin.isatty():
        # Redirected input: one character, or end of input, ends the wait.
        sys.stdin.read(1)
        return

    import termios
    import tty
    fd = sys.stdin.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        sys.stdin.read(1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
