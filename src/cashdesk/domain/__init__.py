"""Domain layer for cashdesk application."""

__all__ = [
    "ChannelService",
    "SessionService",
]


# Services import the database layer, which imports entities from this
# package, so they are resolved on first access.
def __getattr__(name):
    if name == "ChannelService":
        from cashdesk.domain.channel import ChannelService
        return ChannelService
    if name == "SessionService":
        from cashdesk.domain.session import SessionService
        return SessionService
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
