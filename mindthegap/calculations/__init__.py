"""
Calculation Layer

Pure functions that turn income and donation records into the figures the
dashboard shows. Nothing here performs I/O or keeps state.

Import from the submodules directly:
- annualization: Frequency, annualize
- numeric: input sanitizing, parsing and locale formatting
- aggregation: totals, shares, chart datasets, billionaire comparison
"""
