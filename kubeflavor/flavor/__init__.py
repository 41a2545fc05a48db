"""
The flavor plugin contract: validate, healthy, drain and prepare.
"""
