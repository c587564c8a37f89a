"""
Outbound Message Envelope

Everything the Notifier needs to hand one message to Mailgun.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Audience(str, Enum):
    """Which party a notification addresses."""

    USER = "user"
    """The person who submitted the form."""

    ADMIN = "admin"
    """The site administrator."""


@dataclass(frozen=True)
class Envelope:
    """Resolved message parameters for one audience."""

    audience: Audience
    to: str
    sender: str
    subject: str
    template: str
    reply_to: str | None
    variables: dict[str, Any] = field(default_factory=dict)

    def to_mailgun_form(self) -> dict[str, str]:
        """
        Form fields for the Mailgun messages API.

        Template variables travel as a JSON string in "t:variables".
        """
        data = {
            "from": self.sender,
            "to": self.to,
            "subject": self.subject,
            "template": self.template,
            "t:variables": json.dumps(self.variables),
        }
        if self.reply_to:
            data["h:Reply-To"] = self.reply_to
        return data
