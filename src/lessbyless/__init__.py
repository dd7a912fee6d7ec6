# SPDX-License-Identifier: MIT

from lessbyless.cleanup import register_cleanup
from lessbyless.initialize import initialize
from lessbyless.terminal.app import run


def main() -> None:
    initialize()
    register_cleanup()
    run()


if __name__ == "__main__":
    main()
