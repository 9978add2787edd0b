"""Allow ``python -m game_folders``."""

import sys

from .cli import main

sys.exit(main())
