import sys

from review_toolkit.cli import main

sys.exit(main())
