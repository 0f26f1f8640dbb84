"""Internal implementation package for polyclip.

Modules here are considered internal; import public symbols from ``polyclip``.
"""
