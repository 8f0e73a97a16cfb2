"""
Rescue365 - Community animal rescue coordination.
Bystanders report animals in need, rescuers nearby respond, vets take over.
"""

__version__ = "1.0.0"
