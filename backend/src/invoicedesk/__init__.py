"""
invoicedesk - form actions for the invoice dashboard.

Create, update and delete invoices and authenticate dashboard users.
"""

__version__ = "0.1.0"
