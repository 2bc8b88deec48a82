from __future__ import annotations

from xrefsync.ui.cli import run

run()
