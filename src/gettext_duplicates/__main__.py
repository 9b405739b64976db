"""Allow running with: python -m gettext_duplicates"""

from .cli import main

main()
