"""
API endpoints of the Webinar Funnel API.

Modules:
- settings: public settings read, admin settings update
- admin: admin login and token management
- leads: contact form
- payments: payment simulation and coupon validation
- webinar: webinar summary and display constants
"""
