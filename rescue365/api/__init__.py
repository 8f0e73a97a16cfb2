"""
Rescue365 - REST API
"""
