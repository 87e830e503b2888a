"""Allow ``python -m nativeforge``."""

import sys

from nativeforge.pipeline import main

sys.exit(main())
