"""
TaxRollWatch - delinquent property tax roll change tracking.

Compares consecutive exports of a county delinquency roll and reports
properties that newly entered a legal status, appeared or dropped off.
"""

__version__ = "1.0.0"
