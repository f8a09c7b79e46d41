"""
Core components for frumle: scanning, project detection and configuration.
"""
