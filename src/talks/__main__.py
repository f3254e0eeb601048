import sys

from talks.cli import main

sys.exit(main())
