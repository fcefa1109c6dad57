# File: asset_admin/api/endpoints/__init__.py
"""
API endpoints package.

This package contains the endpoint modules for the asset import/export and
label routes.
"""

from asset_admin.api.endpoints import imports, labels
