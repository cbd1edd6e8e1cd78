"""
E_normalization: reference-step matching and instruction-list post-processing.
"""
