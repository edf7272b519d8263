"""
Menu API - hierarchical navigation menus for multi-tenant sites.
"""
