"""
Business services of the Webinar Funnel API.

Modules:
- webhook_client: outbound calls to the n8n webhooks
- field_mapper: n8n settings row to canonical settings
- settings_service: settings fallback resolver and update validation
- auth_service: admin credentials and signed admin tokens
- lead_service: contact form forwarding
- payment_service: payment simulation and coupon validation
"""
