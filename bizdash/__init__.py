"""
Business Dashboard Reporting Service

Products, customers and sales over a document store, with dashboard
aggregates derived on demand.
"""

__version__ = "1.0.0"
