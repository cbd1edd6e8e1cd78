"""
C_generators: heuristic classifiers over instruction text.

Every classifier is a pure function that never raises: unexpected errors
are logged and resolved to the classifier's default.
"""
