"""
frumle - AI-powered codebase analyzer for PHP.

Scans a project, packages its source files and submits them to the frumle
analysis API.
"""

__version__ = "0.1.0"
