"""Allow ``python -m src.webhooks`` to run a handler."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from src.webhooks.cli import main

sys.exit(main())
