"""
Domra Lexicon
English/Khmer technical glossary viewer
"""

__version__ = "1.0.0"
