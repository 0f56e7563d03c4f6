"""
Services package.

- business: order lifecycle, checkout, webhooks, catalog, catering, settings, accounts
- external: payment provider integration
- notifications: customer email
- stores: Supabase table access
- analytics_service: dashboard and analytics figures
"""

# Import services explicitly where needed; nothing is eager-imported here.
__all__: list[str] = []
