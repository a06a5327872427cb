"""
Integration modules for SignDesk

Contains adapters for external systems:
- Outbound mail providers (SendGrid, Resend, Mailgun, Brevo, Gmail SMTP, Gmail API)
"""
