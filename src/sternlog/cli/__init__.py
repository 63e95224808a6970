"""
sternlog command-line tools.
"""
