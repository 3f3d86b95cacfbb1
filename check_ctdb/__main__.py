import sys

from check_ctdb.cli import main

sys.exit(main())
