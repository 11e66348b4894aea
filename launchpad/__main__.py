"""Allow ``python -m launchpad``."""

from launchpad.cli import main

main()
