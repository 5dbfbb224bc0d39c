import sys

from biresamp.cli import main

sys.exit(main())
