"""Lead Scout: discover, enrich and score local business leads."""

__version__ = "0.1.0"
