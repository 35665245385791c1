"""
A package containing units that convert textual representations of data back to binary.
"""
