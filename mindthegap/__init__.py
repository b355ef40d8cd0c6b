"""
Mind the Gap - Source Package

A small charity-giving dashboard for households: record your income and
recurring donations, see what share of your income you give away, and
compare it with what the world's richest people would give at your rate.

DESIGN PRINCIPLES:
1. Derived figures are computed, never stored or hand-edited
2. The system of record decides (server in remote mode, storage in local mode)
3. Storage strategy is swappable
4. Failures become messages, never crashes
"""

__version__ = "1.0.0"
__author__ = "Mind the Gap Team"
