"""Allow ``python -m codeshape``."""

from .cli import main

main()
