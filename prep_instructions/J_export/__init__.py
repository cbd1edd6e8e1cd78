"""
J_export: tabular (CSV) serialization of instruction lists.
"""
