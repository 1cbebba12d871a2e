"""EasyRFQ — request-for-quote and quote management backend.

Companies keep their own customers, catalog items, RFQs and quotes.
Every company's data is isolated from the others; admins can see across
companies.
"""

__version__ = "0.1.0"
