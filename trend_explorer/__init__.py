"""
Core package for the indicator trend explorer.

Submodules provide indicator loading, series selection, trend estimation and
user interface rendering helpers that are orchestrated by the top-level
`app.py`.
"""
