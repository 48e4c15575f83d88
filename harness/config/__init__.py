"""
Configuration tables for the validators.

Business dictionaries (node names, section titles, repository registry,
code-node registry) are kept here as typed constants so validators stay
generic.
"""
