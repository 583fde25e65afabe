"""Allow ``python -m stackseed <project_name>``."""

import sys

from stackseed.cli import main

sys.exit(main())
