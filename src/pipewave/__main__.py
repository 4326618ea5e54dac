"""Allow running the generator with `python -m pipewave`."""

from pipewave import main

main()
