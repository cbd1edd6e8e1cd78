"""
H_pipeline: instruction building and the end-to-end extraction pipeline.
"""
