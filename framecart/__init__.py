"""REST api over the shop database plus the framed-print cart."""

__version__ = "1.0.0"
