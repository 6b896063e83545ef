"""Email channel registry.

Hands out one email adapter per process. The in-memory fake is the default;
a deployment installs its SMTP or provider-backed adapter with
``set_email_channel`` at startup.
"""

from storefront.notifications.channel.email_port import EmailPort

_email_channel: EmailPort | None = None


def get_email_channel() -> EmailPort:
    """Return the configured email adapter, creating the fake on first use."""
    global _email_channel
    if _email_channel is None:
        from storefront.notifications.channel.fake_email import FakeEmailAdapter

        _email_channel = FakeEmailAdapter()
    return _email_channel


def set_email_channel(adapter: EmailPort) -> None:
    global _email_channel
    _email_channel = adapter


def reset_channels():
    """Drop the configured adapter (useful for testing)."""
    global _email_channel
    _email_channel = None
