"""
Printed Logo Inspection System

Compares a reference master image of a printed logo against a photograph of a
manufactured part using a remote visual-comparison model, and maps the returned
defect geometry onto resolution-independent overlay regions.
"""

__version__ = "0.1.0"
__author__ = "LogoGuard Team"
