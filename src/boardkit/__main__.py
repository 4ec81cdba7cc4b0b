"""Allow ``python -m boardkit``."""

from boardkit.cli import main

if __name__ == "__main__":
    main()
