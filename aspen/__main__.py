import sys

from aspen.cli import main

sys.exit(main())
