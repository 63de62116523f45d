# ilp_runner/__main__.py
import sys

from ilp_runner.cli import main

sys.exit(main())
