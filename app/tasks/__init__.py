"""
Background tasks for the storefront.

- notification_tasks: customer emails (order confirmation, status updates)
- order_tasks: periodic order housekeeping
"""
