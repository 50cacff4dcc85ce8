"""
Command-line interface: argument parsing, progress display, and console output.
"""
