"""
Transactional email bodies for the auth flows.

Text and HTML variants are built side by side; the HTML is intentionally
plain so it renders in every client.
"""

from html import escape as html_escape

from src.app.services.notifier import EmailMessage


def verification_code_email(
    *, to_email: str, code: str, callback_url: str, expires_minutes: int
) -> EmailMessage:
    expires_text = f"{expires_minutes} minute{'s' if expires_minutes != 1 else ''}"

    html_body = f"""
    <html>
      <body style="font-family: Arial, sans-serif; padding: 24px;">
        <div style="max-width: 520px; margin: 0 auto;">
          <h2 style="margin-top: 0;">Verify your email</h2>
          <p style="line-height: 1.6;">
            Enter the code below to verify your email. This code expires in {expires_text}.
          </p>
          <div style="margin: 24px 0; font-size: 32px; letter-spacing: 8px; text-align: center;">
            {html_escape(code)}
          </div>
          <p style="line-height: 1.6;">
            <a href="{html_escape(callback_url, quote=True)}">{html_escape(callback_url)}</a>
          </p>
          <p style="line-height: 1.6; color: #64748b;">
            Didn't request this? You can ignore this message.
          </p>
        </div>
      </body>
    </html>
    """.strip()

    text_body = f"""
Verify your email

Enter this code (expires in {expires_text}):

{code}

{callback_url}

If you didn't request this, ignore the message.
""".strip()

    return EmailMessage(
        to=to_email,
        subject="Verification code",
        html_body=html_body,
        text_body=text_body,
    )


def reset_password_email(*, to_email: str, reset_url: str) -> EmailMessage:
    html_body = f"""
    <html>
      <body style="font-family: Arial, sans-serif; padding: 24px;">
        <div style="max-width: 520px; margin: 0 auto;">
          <h2 style="margin-top: 0;">Reset your password</h2>
          <p style="line-height: 1.6;">
            Follow the link below to choose a new password. The link can be used once.
          </p>
          <p style="line-height: 1.6;">
            <a href="{html_escape(reset_url, quote=True)}">Reset password</a>
          </p>
          <p style="line-height: 1.6; color: #64748b;">
            Didn't request this? You can ignore this message.
          </p>
        </div>
      </body>
    </html>
    """.strip()

    text_body = f"""
Reset your password

Open this link to choose a new password:

{reset_url}

If you didn't request this, ignore the message.
""".strip()

    return EmailMessage(
        to=to_email,
        subject="Password reset",
        html_body=html_body,
        text_body=text_body,
    )
