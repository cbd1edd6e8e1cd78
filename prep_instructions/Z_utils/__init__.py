"""
Z_utils: Small shared text helpers (tokenizing, whitespace cleanup).
"""
