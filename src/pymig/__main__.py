"""Allow running pymig as a module: python -m pymig."""

from pymig.cli import main

if __name__ == "__main__":
    main()
