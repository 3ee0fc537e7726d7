"""IR Dump Decoder - command line entry point."""

import sys

from ir_dump_decoder.cli import main


if __name__ == "__main__":
    sys.exit(main())
