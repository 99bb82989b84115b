"""Library management: libraries, books, members and the loans between them."""

__version__ = "1.0.0"
