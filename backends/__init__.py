"""
Platform backends.

The concrete backend is chosen explicitly by name at startup (config file or
``--backend``, see :mod:`backends.factory`); nothing else in the program looks
at which one it got.
"""
