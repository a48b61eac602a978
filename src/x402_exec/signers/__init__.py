"""
Signers
"""
