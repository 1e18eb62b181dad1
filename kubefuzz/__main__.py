"""Allow ``python -m kubefuzz``."""

from kubefuzz.cli import main

if __name__ == "__main__":
    main()
