"""
Composition root, route guard and CLI.
"""
