import sys

from ltrkit.cli import main

sys.exit(main())
