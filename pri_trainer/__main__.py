from __future__ import annotations

import sys
from pathlib import Path

if __package__ in (None, ""):
    # Started as ``python pri_trainer/__main__.py``: make the package importable.
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pri_trainer.app import run
from pri_trainer.logging_utils import configure_logging


def main() -> int:
    """Configure logging from the environment, then open the trainer window."""
    configure_logging()
    return run()


if __name__ == "__main__":
    raise SystemExit(main())
