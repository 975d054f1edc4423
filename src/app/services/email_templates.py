"""
Transactional email templates.

Every value that originates from a user or a client device is HTML escaped
before interpolation. Each builder returns (subject, html).
"""

from datetime import datetime, timedelta
from html import escape
from typing import Optional

from src.domain.device import DeviceInfo

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def ordinal_suffix(day: int) -> str:
    if 11 <= day <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def format_date_with_ordinal(moment: datetime) -> str:
    """1st March, 2025"""
    return f"{moment.day}{ordinal_suffix(moment.day)} {MONTH_NAMES[moment.month - 1]}, {moment.year}"


def set_password_link(app_url: str, raw_token: str) -> str:
    return f"{app_url.rstrip('/')}/set-password/{raw_token}"


def describe_ttl(ttl: timedelta) -> str:
    """1 hour, 2 hours, 30 minutes"""
    minutes = int(ttl.total_seconds() // 60)
    if minutes % 60 == 0:
        hours = minutes // 60
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    return f"{minutes} minutes"


def build_email(app_name: str, body_html: str, title: Optional[str] = None, preheader: str = "") -> str:
    title = escape(title or app_name)
    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{title}</title>
  <style>
    body {{ margin:0; padding:0; background:#f4f6f8; font-family: -apple-system, 'Segoe UI', Roboto, Arial; }}
    .main {{ background:#ffffff; margin:0 auto; max-width:600px; border-radius:8px; }}
    .content {{ padding:24px; color:#0f1724; font-size:16px; line-height:1.5; }}
    .btn {{ display:inline-block; padding:12px 20px; border-radius:8px; background:#0066ff; color:#fff; text-decoration:none; font-weight:600; }}
    .muted {{ color:#64748b; font-size:13px; }}
    .card {{ border-radius:8px; padding:16px; border:1px solid #eef2f7; }}
    .footer {{ padding:18px 24px; text-align:center; font-size:12px; color:#94a3b8; }}
  </style>
</head>
<body>
  <table class="main" role="presentation" cellpadding="0" cellspacing="0">
    <tr>
      <td class="content">
        <div style="display:none">{escape(preheader)}</div>
        {body_html}
      </td>
    </tr>
    <tr>
      <td class="footer">{escape(app_name)}</td>
    </tr>
  </table>
</body>
</html>"""


def device_details_html(
    device: Optional[DeviceInfo], heading: str, include_network: bool = True
) -> str:
    """
    Render the device block embedded in security notifications.

    The IP address and raw coordinates are only shown when include_network is
    set (password change); the login alert shows place names only.
    """
    if device is None:
        return ""

    items = []
    if device.device_name:
        items.append(f"<li><strong>Device</strong>: {escape(device.device_name)}</li>")
    if device.browser_name:
        items.append(f"<li><strong>Browser</strong>: {escape(device.browser_name)}</li>")
    if include_network and device.ip:
        items.append(f"<li><strong>IP</strong>: {escape(device.ip)}</li>")

    location = device.location
    if location is not None:
        place = location.place()
        if include_network:
            coords = (
                f"({location.lat}, {location.lon})" if location.has_coordinates() else ""
            )
            items.append(
                f"<li><strong>Location</strong>: {escape(place or coords or 'Unknown')}</li>"
            )
        elif place:
            items.append(f"<li><strong>Location</strong>: {escape(place)}</li>")

    if device.user_agent:
        items.append(f"<li><strong>User Agent</strong>: {escape(device.user_agent)}</li>")

    if not items:
        return ""

    return (
        f'<h4 style="margin:12px 0 6px 0">{escape(heading)}</h4>'
        f'<ul style="margin:0 0 0 16px;">{"".join(items)}</ul>'
    )


def password_setup_email(
    app_name: str,
    set_password_url: str,
    user_name: Optional[str] = None,
    expires_in: str = "1 hour",
    reason: str = "registration",
) -> tuple[str, str]:
    """
    Email carrying the set-password link.

    reason is one of "registration", "resend" or "reset"; it only changes the
    subject and the lead sentence.
    """
    subjects = {
        "registration": f"Complete your {app_name} registration",
        "resend": f"{app_name} - Your password set link (resend)",
        "reset": "Password reset request",
    }
    leads = {
        "registration": "Click the button below to set a password and complete your registration.",
        "resend": "Here is a new link to set your password and complete your registration.",
        "reset": "We received a request to reset your password. Click the button below to choose a new one.",
    }
    subject = subjects.get(reason, subjects["registration"])
    url = escape(set_password_url)
    name_line = (
        f'<p style="margin:0 0 8px 0; font-weight:600">Hi {escape(user_name)},</p>'
        if user_name
        else ""
    )
    body = f"""
    {name_line}
    <div class="card">
      <h2 style="margin:0 0 8px 0; font-size:20px">Set your {escape(app_name)} password</h2>
      <p class="muted">{leads.get(reason, leads["registration"])}</p>
      <p style="text-align:center; margin:18px 0"><a href="{url}" class="btn">Set password</a></p>
      <p class="muted">Or paste this link in your browser:<br/><a href="{url}" style="word-break:break-all">{url}</a></p>
      <p class="muted" style="margin-top:12px">This link will expire in {escape(expires_in)}.</p>
    </div>
    """
    html = build_email(
        app_name,
        body,
        title=f"Set your {app_name} password",
        preheader=f"Set your password to access your {app_name} account",
    )
    return subject, html


def password_changed_email(
    app_name: str, user_email: str, device: Optional[DeviceInfo] = None
) -> tuple[str, str]:
    details = device_details_html(device, "Device & location details", include_network=True)
    body = f"""
    <div class="card">
      <h2 style="margin:0 0 8px 0; font-size:20px">Your {escape(app_name)} password was changed</h2>
      <p class="muted">A password was recently set for the account {escape(user_email)}. If this was you, no action is needed.</p>
      {details}
      <p class="muted" style="margin-top:12px">If you did not make this change, please contact support immediately.</p>
    </div>
    """
    html = build_email(
        app_name,
        body,
        title=f"Password changed - {app_name}",
        preheader=f"Your {app_name} password was changed",
    )
    return f"New password set for your {app_name} account", html


def login_notification_email(
    app_name: str, user_email: str, when: datetime, device: Optional[DeviceInfo] = None
) -> tuple[str, str]:
    details = device_details_html(device, "Device details", include_network=False)
    body = f"""
    <div class="card">
      <h2 style="margin:0 0 8px 0; font-size:20px">New sign-in to your {escape(app_name)} account</h2>
      <p class="muted">A new sign-in was detected for the account {escape(user_email)} on {format_date_with_ordinal(when)} (UTC).</p>
      {details}
      <p class="muted" style="margin-top:12px">If this was you, you can safely ignore this message. If not, please reset your password immediately or contact support.</p>
    </div>
    """
    html = build_email(
        app_name,
        body,
        title=f"New sign-in - {app_name}",
        preheader=f"New sign-in to your {app_name} account",
    )
    return f"New sign-in to your {app_name} account", html
