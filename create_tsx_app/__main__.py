"""Allow ``python -m create_tsx_app``."""

import sys

from .pipeline import main

sys.exit(main())
