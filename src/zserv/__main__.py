import sys

from zserv.cli import main

sys.exit(main())
