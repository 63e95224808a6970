"""
Core configuration, constants, exceptions and logging wiring for sternlog.
"""
