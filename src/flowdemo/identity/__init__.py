"""
Identity - Local key storage and the wallet session (login / logout).
"""
