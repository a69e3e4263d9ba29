"""
Core building blocks: errors, models, schema resolution and row conversion.
"""
