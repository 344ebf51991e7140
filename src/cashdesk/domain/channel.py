"""Channel and fee configuration domain service."""

import re
import time
from decimal import Decimal
from typing import Optional

from cashdesk.database.base import Database
from cashdesk.domain.categories import commission_direction_for
from cashdesk.domain.commission import (
    DEFAULT_FEE_SCHEDULE,
    commission_for_channel,
    resolve_fee_schedule,
    sort_tiers,
)
from cashdesk.domain.entities import Channel, FeeSchedule, OperationCategory
from cashdesk.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    channel_not_found,
    default_channel_delete_blocked,
    duplicate_channel_name,
)
from cashdesk.logging_setup import get_logger

logger = get_logger("cashdesk.domain.channel")

DEFAULT_CHANNELS: tuple[tuple[str, str], ...] = (
    ("pichincha", "Banco Pichincha"),
    ("guayaquil", "Banco Guayaquil"),
    ("western_union", "Western Union"),
    ("yaganaste", "YaGanaste"),
    ("recarga_facil", "Recarga Fácil"),
)


def channel_slug(name: str) -> str:
    """Build the ID fragment for a custom channel name."""
    slug = re.sub(r"\s+", "_", name.strip().lower())
    return re.sub(r"[^a-z0-9_]", "", slug)


class ChannelService:
    """Service for managing channels and fee schedules."""

    def __init__(self, db: Database):
        """Initialize channel service.

        Args:
            db: Database instance
        """
        self.db = db

    def seed_default_channels(self, user_id: str) -> list[str]:
        """Create the pre-seeded channels a user is missing.

        Returns:
            IDs of the channels created (empty when all exist)
        """
        created = []
        for channel_id, name in DEFAULT_CHANNELS:
            if self.db.get_channel(user_id, channel_id) is None:
                self.db.create_channel(user_id, channel_id, name, is_default=True)
                created.append(channel_id)
        if created:
            logger.info("Seeded %d default channels for user %s", len(created), user_id)
        return created

    def list_channels(self, user_id: str, active_only: bool = False) -> list[Channel]:
        """List channels.

        Args:
            user_id: Channel owner
            active_only: If True, skip inactive channels

        Returns:
            List of channel entities
        """
        channels = self.db.list_channels(user_id)
        if active_only:
            return [channel for channel in channels if channel.active]
        return channels

    def get_channel(self, user_id: str, channel_id: str) -> Optional[Channel]:
        """Get channel by ID."""
        return self.db.get_channel(user_id, channel_id)

    def require_channel(self, user_id: str, channel_id: str) -> Channel:
        """Get channel by ID, raising if missing."""
        channel = self.db.get_channel(user_id, channel_id)
        if channel is None:
            raise NotFoundError(channel_not_found(channel_id))
        return channel

    def find_channel_by_name(
        self, user_id: str, name: str, active_only: bool = False
    ) -> Optional[Channel]:
        """Find the first channel with the given display name."""
        for channel in self.list_channels(user_id, active_only=active_only):
            if channel.name == name:
                return channel
        return None

    def resolve_channel(self, user_id: str, channel: str) -> Channel:
        """Resolve a channel by ID or display name.

        Raises:
            NotFoundError: If nothing matches
        """
        found = self.db.get_channel(user_id, channel)
        if found is None:
            found = self.find_channel_by_name(user_id, channel)
        if found is None:
            raise NotFoundError(channel_not_found(channel))
        return found

    def add_channel(self, user_id: str, name: str) -> Channel:
        """Create a custom channel.

        Args:
            user_id: Channel owner
            name: Display name

        Returns:
            The new channel

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a channel with that name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Channel name cannot be empty")
        if self.find_channel_by_name(user_id, name) is not None:
            raise ConflictError(duplicate_channel_name(name))

        channel_id = f"custom_{channel_slug(name)}_{int(time.time() * 1000)}"
        self.db.create_channel(user_id, channel_id, name, is_default=False)
        logger.info("Added channel %s (%s) for user %s", name, channel_id, user_id)
        return self.require_channel(user_id, channel_id)

    def toggle_channel(self, user_id: str, channel_id: str) -> Channel:
        """Flip a channel between active and inactive."""
        channel = self.require_channel(user_id, channel_id)
        self.db.update_channel_active(user_id, channel_id, not channel.active)
        logger.info(
            "Channel %s is now %s", channel_id, "inactive" if channel.active else "active"
        )
        return self.require_channel(user_id, channel_id)

    def delete_channel(self, user_id: str, channel_id: str) -> None:
        """Delete a custom channel.

        Raises:
            NotFoundError: If the channel does not exist
            DependencyError: If the channel is a default one
        """
        channel = self.require_channel(user_id, channel_id)
        if channel.is_default:
            raise DependencyError(default_channel_delete_blocked(channel_id))
        self.db.delete_channel(user_id, channel_id)
        logger.info("Deleted channel %s for user %s", channel_id, user_id)

    def set_channel_fees(
        self,
        user_id: str,
        channel_id: str,
        use_custom_fees: bool,
        fee_schedule: Optional[FeeSchedule] = None,
    ) -> Channel:
        """Enable, disable or replace a channel's personalized schedule.

        Passing no schedule keeps the stored one, so a personalized schedule
        survives being switched off and on again.
        """
        channel = self.require_channel(user_id, channel_id)
        if fee_schedule is None:
            fee_schedule = channel.fee_schedule
        else:
            fee_schedule = self._normalized(fee_schedule)
        self.db.update_channel_fees(user_id, channel_id, use_custom_fees, fee_schedule)
        return self.require_channel(user_id, channel_id)

    def get_default_fee_schedule(self, user_id: str) -> FeeSchedule:
        """Get the user's default schedule, or the built-in one."""
        stored = self.db.get_default_fee_schedule(user_id)
        return stored if stored is not None else DEFAULT_FEE_SCHEDULE

    def set_default_fee_schedule(self, user_id: str, fee_schedule: FeeSchedule) -> FeeSchedule:
        """Store the user's default schedule."""
        fee_schedule = self._normalized(fee_schedule)
        self.db.set_default_fee_schedule(user_id, fee_schedule)
        logger.info("Updated default fee schedule for user %s (%s)", user_id, fee_schedule.mode.value)
        return fee_schedule

    def fee_schedule_for(self, user_id: str, channel: Optional[Channel]) -> FeeSchedule:
        """Schedule that applies to operations on ``channel``."""
        return resolve_fee_schedule(channel, self.get_default_fee_schedule(user_id))

    def quote_commission(
        self,
        user_id: str,
        amount: Decimal,
        category: OperationCategory,
        channel_name: Optional[str] = None,
    ) -> Decimal:
        """Suggest the commission for an operation.

        An unknown channel name falls back to the default schedule.
        """
        channel = None
        if channel_name:
            channel = self.find_channel_by_name(user_id, channel_name, active_only=True)
        direction = commission_direction_for(category)
        commission = commission_for_channel(
            amount, direction, channel, self.get_default_fee_schedule(user_id)
        )
        logger.debug(
            "Quoted %s for %s of %s on %s", commission, category.value, amount, channel_name or "-"
        )
        return commission

    def _normalized(self, fee_schedule: FeeSchedule) -> FeeSchedule:
        """Keep edited tiers sorted by lower bound."""
        return FeeSchedule(
            mode=fee_schedule.mode,
            flat=fee_schedule.flat,
            tiers=sort_tiers(fee_schedule.tiers),
        )
