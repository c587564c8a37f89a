"""
Payload Builder

Derives the outbound message envelope for each audience from a validated
submission. Replies always route toward the administrator (user message)
or back to the submitter (admin message).
"""

from collections.abc import Mapping
from typing import Any

from intake.shared.models.envelope import Audience, Envelope
from intake.shared.models.form_config import FormConfig


def template_variables(config: FormConfig, submission: Mapping[str, str]) -> dict[str, Any]:
    """The org name plus every configured field; missing fields map to None."""
    variables: dict[str, Any] = {"org": config.org}
    for field in config.field_names:
        variables[field] = submission.get(field)
    return variables


def build_envelope(
    config: FormConfig,
    submission: Mapping[str, str],
    audience: Audience,
) -> Envelope:
    """
    Build the envelope for one audience.

    Args:
        config: Normalized form configuration
        submission: Validated submission fields
        audience: Audience.USER or Audience.ADMIN

    Returns:
        Envelope ready for the Notifier
    """
    if audience is Audience.USER:
        to = f"{submission.get('name')} <{submission.get('email')}>"
        reply_to = config.admin_email
        template = config.user_template
    else:
        to = config.admin_email
        reply_to = submission.get("email")
        template = config.admin_template

    return Envelope(
        audience=audience,
        to=to,
        sender=config.sender,
        subject=template.subject,
        template=template.name,
        reply_to=reply_to,
        variables=template_variables(config, submission),
    )


def build_user_envelope(config: FormConfig, submission: Mapping[str, str]) -> Envelope:
    return build_envelope(config, submission, Audience.USER)


def build_admin_envelope(config: FormConfig, submission: Mapping[str, str]) -> Envelope:
    return build_envelope(config, submission, Audience.ADMIN)
