"""
TaxRollWatch - delinquent property tax roll change tracker.

Compares each uploaded roll export with the previous one and reports new
legal statuses, new and removed properties and likely foreclosures.
"""

from taxrollwatch.interface.cli import main


if __name__ == "__main__":
    main()
