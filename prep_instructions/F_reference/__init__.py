"""
F_reference: master instruction sequence (canonical steps per prep and procedure time).
"""
