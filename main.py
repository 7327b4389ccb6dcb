"""Launch the streamwindow live demo from a source checkout.

Equivalent to ``python -m streamwindow.gui.application``; Qt options and the
``--config``/``--streams``/... flags are passed straight through.
"""

from __future__ import annotations

import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from streamwindow.gui.application import main  # noqa: E402

if __name__ == "__main__":
    main(sys.argv)
