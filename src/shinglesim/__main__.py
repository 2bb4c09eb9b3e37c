import sys

from shinglesim.cli import main

sys.exit(main())
