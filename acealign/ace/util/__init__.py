"""
Helpers for the ace-util command line utility
"""
