"""Allow ``python -m pantry``."""

from .app import main

raise SystemExit(main())
