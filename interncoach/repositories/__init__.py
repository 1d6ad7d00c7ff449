"""
Persistence adapters.

These modules encapsulate how internships are stored/retrieved (today a single
JSON file). Services depend on the store object rather than touching the file.
"""
