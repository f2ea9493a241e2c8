"""
Experimental design inference.

Reconstructs treatment types, levels, and labels from raw exposure matrices.
"""
