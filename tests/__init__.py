"""
Tests for the Webinar Funnel API.

Structure:
- test_field_mapper.py: n8n row to settings mapping
- test_settings_resolver.py: live / unconfigured / degraded reads
- test_settings_update.py: update validation and sheet row
- test_settings_api.py: settings endpoints
- test_webhook_client.py: outbound n8n calls
- test_admin_auth.py: admin tokens and login
- test_payments.py: simulated checkout and coupons
- test_contact.py: contact form
- test_validators.py: helpers
- test_main.py: health routes and error rendering
- conftest.py: shared pytest fixtures
"""
