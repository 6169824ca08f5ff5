"""Album share invitation emails."""

from datetime import datetime
from html import escape
from typing import Optional

from libs.common.emails.core import send_email


async def send_share_invitation_email(
    to_email: str,
    *,
    album_title: str,
    photographer_name: str,
    share_url: str,
    recipient_name: Optional[str] = None,
    expires_at: Optional[datetime] = None,
    has_password: bool = False,
) -> bool:
    """
    Invite a client to view an album.
    """
    greeting = f"Hi {recipient_name}," if recipient_name else "Hi,"
    subject = f"{photographer_name} shared \"{album_title}\" with you"

    lines = [
        greeting,
        "",
        f"{photographer_name} shared the album \"{album_title}\" with you.",
        f"View it here: {share_url}",
    ]
    if has_password:
        lines.append("The album is password protected; ask the photographer for it.")
    if expires_at is not None:
        lines.append(f"The link expires on {expires_at:%B %d, %Y}.")
    body = "\n".join(lines)

    expiry_html = (
        f"<p>The link expires on {expires_at:%B %d, %Y}.</p>" if expires_at else ""
    )
    password_html = (
        "<p>The album is password protected; ask the photographer for it.</p>"
        if has_password
        else ""
    )
    html_body = f"""
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <p>{escape(greeting)}</p>
        <p><strong>{escape(photographer_name)}</strong> shared the album
        <strong>{escape(album_title)}</strong> with you.</p>
        <p><a href="{escape(share_url)}" style="background: #111827; color: #fff;
            padding: 10px 18px; border-radius: 6px; text-decoration: none;">View album</a></p>
        {password_html}
        {expiry_html}
    </body>
    </html>
    """
    return await send_email(to_email, subject, body, html_body=html_body)
