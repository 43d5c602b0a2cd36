"""
Transactional e-mail contents
Each builder returns (subject, html body)
"""
from typing import Optional, Tuple


def application_confirmation(job_title: str, company_name: Optional[str]) -> Tuple[str, str]:
    at_company = f" at <strong>{company_name}</strong>" if company_name else ""
    body = (
        "<h2>Application Submitted!</h2>"
        f"<p>Your application for <strong>{job_title}</strong>{at_company} has been received.</p>"
        "<p>The employer will review your application and we'll notify you of any updates.</p>"
    )
    return "Application submitted successfully", body


def application_status_update(job_title: str, status: str, message: Optional[str] = None) -> Tuple[str, str]:
    body = (
        "<h2>Application Update</h2>"
        f"<p>Your application for <strong>{job_title}</strong> has been updated to: "
        f"<strong>{status.upper()}</strong></p>"
    )
    if message:
        body += f"<p><strong>Employer Message:</strong> {message}</p>"
    return f"Application {status.capitalize()}", body


def welcome(first_name: str) -> Tuple[str, str]:
    body = (
        f"<h2>Welcome, {first_name}!</h2>"
        "<p>Your account is ready. Browse jobs, save the ones you like and apply in a click.</p>"
    )
    return "Welcome to the job board", body


def email_verification(first_name: str, verify_url: str) -> Tuple[str, str]:
    body = (
        f"<h2>Hi {first_name},</h2>"
        "<p>Please confirm your e-mail address to finish setting up your account.</p>"
        f'<p><a href="{verify_url}">Verify my e-mail</a></p>'
        "<p>The link expires in 24 hours.</p>"
    )
    return "Verify your e-mail address", body


def password_reset(reset_url: str) -> Tuple[str, str]:
    body = (
        "<h2>Password reset</h2>"
        "<p>Someone asked to reset the password of your account. "
        "If it was you, follow the link below; otherwise ignore this message.</p>"
        f'<p><a href="{reset_url}">Choose a new password</a></p>'
        "<p>The link expires in 30 minutes.</p>"
    )
    return "Reset your password", body
