"""One-time passcode emails."""

from libs.common.emails.core import send_email

_PURPOSE_SUBJECTS = {
    "signup": "Verify your Shutterbox account",
    "login": "Your Shutterbox login code",
    "password_reset": "Reset your Shutterbox password",
    "email_verification": "Verify your email address",
}


async def send_otp_email(
    to_email: str, code: str, purpose: str, expires_in_minutes: int
) -> bool:
    subject = _PURPOSE_SUBJECTS.get(purpose, "Your Shutterbox verification code")
    body = (
        f"Your verification code is {code}.\n\n"
        f"It expires in {expires_in_minutes} minutes. If you did not request "
        "this code you can ignore this email."
    )
    html_body = f"""
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <h2 style="color: #111827;">{subject}</h2>
        <p>Your verification code is:</p>
        <p style="font-size: 28px; font-weight: bold; letter-spacing: 6px;">{code}</p>
        <p>It expires in {expires_in_minutes} minutes.</p>
        <p style="color: #6b7280; font-size: 13px;">
            If you did not request this code you can ignore this email.
        </p>
    </body>
    </html>
    """
    return await send_email(to_email, subject, body, html_body=html_body)
