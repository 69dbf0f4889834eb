"""rolewatch: watch company job boards for roles matching a few keyword queries."""

__version__ = "0.1.0"
