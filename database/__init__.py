"""
Database package — MongoDB symptom entry storage.
"""
