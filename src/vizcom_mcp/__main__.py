"""Allow `python -m vizcom_mcp`."""

import sys

from vizcom_mcp.cli import main

sys.exit(main())
