"""Line-oriented prompt: ``python -m savage``."""

from __future__ import annotations

import logging
import sys

from savage import config
from savage.command import is_incomplete
from savage.errors import SavageError
from savage.interpreter import Interpreter

logger = logging.getLogger("savage")


def read_command() -> str:
    """Read one command, asking for more lines while the input is unfinished."""
    line = input("in: ")
    while line.strip() and is_incomplete(line):
        line += "\n" + input("... ")
    return line


def main() -> int:
    logging.basicConfig(
        level=config.get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    interpreter = Interpreter()

    print("Savage Computer Algebra System")
    print("Enter ? for help, press Ctrl+D to quit")

    while True:
        print()
        try:
            line = read_command()
        except (EOFError, KeyboardInterrupt):
            print()
            return 0

        if not line.strip():
            continue

        try:
            output = interpreter.execute(line)
        except SavageError as e:
            logger.debug("command failed", exc_info=True)
            print(f"Error: {e}")
            continue

        if output.index is not None:
            print(f"out[{output.index}]: {output.text}")
        else:
            print(output.text)


if __name__ == "__main__":
    sys.exit(main())
