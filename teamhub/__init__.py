"""Event-driven in-app notifications for teamhub.

The package intentionally re-exports nothing; importing a submodule never
builds engines or connections as a side effect.
"""
