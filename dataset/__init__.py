"""
dataset — random box generation.

Public API:
    from dataset.generator import random_item, generate_items
"""
