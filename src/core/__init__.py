"""Core domain package for searchgate.

Core contains the admission filters and the migration runner without any
torrent client or storage-specific code, keeping the decision logic portable.
"""
