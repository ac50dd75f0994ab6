import sys

from foxdie.cli import main

sys.exit(main())
