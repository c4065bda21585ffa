"""Allow ``python -m layerkv``."""

import layerkv.cli as cli

cli.main()
