"""
Interfacing with tools outside of acealign (tokenizers)
"""
