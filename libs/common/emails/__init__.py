"""
Shutterbox Email Package.

Modules:
- core: Base send_email function (SMTP)
- auth: One-time passcode emails
- sharing: Album share invitations
"""
