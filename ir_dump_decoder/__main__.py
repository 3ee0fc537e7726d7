import sys

from ir_dump_decoder.cli import main

sys.exit(main())
