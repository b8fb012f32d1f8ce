"""Allow ``python -m spm_mirror``."""
from __future__ import annotations

import sys

from spm_mirror.cli._dispatcher import main

if __name__ == "__main__":
    sys.exit(main())
