"""PSY-Q signature scanner.

Identifies statically linked PSY-Q SDK object modules inside a PlayStation
executable by matching byte signatures, and derives a symbol map and a
best-guess SDK version from the matches.
"""

__version__ = "1.0.0"
