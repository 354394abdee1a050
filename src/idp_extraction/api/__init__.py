# ============================================================================
# src/idp_extraction/api/__init__.py
# ============================================================================
"""
REST API for the IDP extraction engine.
"""
