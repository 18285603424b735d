import sys

from tabterm.main import main

sys.exit(main())
