"""
Marathi Invoice - Source Package

Invoice generation and bookkeeping for a film-distribution business:
direct-entry and Excel-imported billing data, Marathi (Devanagari)
numerals and transliteration, invoice totals and GST, persistence to a
remote invoice service, and aggregate Excel reports.

DESIGN PRINCIPLES:
1. Display formatting never raises - it degrades to a blank or the input
2. Blank and zero amounts are different things
3. Money is summed in integer paise
4. External services are optional and replaceable
5. Every save and import is auditable
"""

__version__ = "1.0.0"
__author__ = "Marathi Invoice Team"
