"""lexiq: spaced-repetition scheduling core for language learning items."""

from lexiq.consts import VERSION

__version__ = VERSION
