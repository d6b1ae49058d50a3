"""Flask blueprint package for the invoice dashboard.

Blueprints are defined in the sibling modules (``auth_routes``,
``main_routes``, ``invoice_routes`` and ``query_routes``) and registered in
:func:`invoice_dashboard.create_app`.
"""
