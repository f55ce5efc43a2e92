"""
URLverse - Every URL is a page.

Turns arbitrary URL paths into complete HTML pages generated by Google
Gemini, styled by a selectable flavor.
"""

__version__ = "1.0.0"
