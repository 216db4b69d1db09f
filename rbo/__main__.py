"""Allow ``python -m rbo``."""

from rbo.cli import main

main()
