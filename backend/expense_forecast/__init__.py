"""
Expense Forecast API: monthly expense forecasting for small-business records.
"""

__version__ = "1.0.0"
