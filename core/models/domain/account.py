"""Account domain model."""

from pydantic import BaseModel, ConfigDict, SecretStr


class Account(BaseModel):
    """A rewards account as read from the accounts file.

    Only ``email`` and ``enabled`` are interpreted; everything else is kept
    opaque and never rendered.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    email: str
    enabled: bool = True
    password: SecretStr | None = None

    @property
    def redacted_email(self) -> str:
        """First two characters of the local part plus the domain."""
        local, _, domain = self.email.partition("@")
        if not local or not domain:
            return "***@***"
        return f"{local[:2]}***@{domain}"
