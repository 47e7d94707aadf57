from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from memberbridge.core.config import Settings
from memberbridge.core.identity import SubscriberIdentity, field
from memberbridge.integrations.telegram.bot_api import TelegramBotAPI, TelegramBotAPIError
from memberbridge.services.notifications.templates import INVITE_PARSE_MODE, invite_message_text

logger = logging.getLogger(__name__)

ActionKind = Literal["invite", "revoke"]


@dataclass(frozen=True)
class ActionResult:
    action: ActionKind
    ok: bool
    reason: Optional[str] = None
    invite_url: Optional[str] = None
    failed_steps: tuple[str, ...] = ()


class MembershipActionExecutor:
    """
    Drives invite/revoke against the Telegram group.

    Never raises for platform errors: every outcome comes back as an
    ActionResult and is logged. No retries here; a retry would come from the
    next webhook delivery, if any.
    """

    def __init__(
        self,
        bot: TelegramBotAPI,
        *,
        group_chat_id: str,
        invite_ttl_sec: int = 1800,
        member_limit: int = 1,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._bot = bot
        self._group_chat_id = group_chat_id
        self._invite_ttl_sec = invite_ttl_sec
        self._member_limit = member_limit
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, bot: TelegramBotAPI) -> "MembershipActionExecutor":
        return cls(
            bot,
            group_chat_id=settings.group_chat_id or "",
            invite_ttl_sec=settings.invite_ttl_sec,
            member_limit=settings.invite_member_limit,
        )

    def issue_invite(self, identity: SubscriberIdentity, tier_label: str) -> ActionResult:
        expire_date = int(self._clock()) + self._invite_ttl_sec

        # 1) single-use, short-lived link
        try:
            link = self._bot.create_chat_invite_link(
                self._group_chat_id,
                member_limit=self._member_limit,
                expire_date=expire_date,
            )
        except TelegramBotAPIError as e:
            logger.error("Invite link creation failed for chat_id=%s: %s", identity.chat_id, e)
            return ActionResult(action="invite", ok=False, reason=f"invite_link_failed: {e.description}")

        invite_url = field(link, "invite_link")
        if not invite_url:
            logger.error("Invite link response had no invite_link for chat_id=%s", identity.chat_id)
            return ActionResult(action="invite", ok=False, reason="invite_link_missing")

        # 2) DM it. A link that fails to deliver is left to expire on its own.
        try:
            self._bot.send_message(
                int(identity.chat_id),
                invite_message_text(tier_label, invite_url),
                parse_mode=INVITE_PARSE_MODE,
            )
        except TelegramBotAPIError as e:
            logger.error("Invite delivery failed for chat_id=%s: %s", identity.chat_id, e)
            return ActionResult(
                action="invite",
                ok=False,
                reason=f"delivery_failed: {e.description}",
                invite_url=invite_url,
            )

        logger.info("Invite sent to chat_id=%s (tier=%s)", identity.chat_id, tier_label)
        return ActionResult(action="invite", ok=True, invite_url=invite_url)

    def revoke_membership(self, identity: SubscriberIdentity) -> ActionResult:
        """
        Ban then unban: removes the member but lets them rejoin with a fresh
        invite later. Unban is attempted even when ban failed.
        """
        user_id = int(identity.chat_id)
        failed: list[str] = []
        reasons: list[str] = []

        try:
            self._bot.ban_chat_member(self._group_chat_id, user_id)
        except TelegramBotAPIError as e:
            logger.error("Ban failed for chat_id=%s: %s", identity.chat_id, e)
            failed.append("ban")
            reasons.append(f"ban: {e.description}")

        try:
            self._bot.unban_chat_member(self._group_chat_id, user_id)
        except TelegramBotAPIError as e:
            logger.error("Unban failed for chat_id=%s: %s", identity.chat_id, e)
            failed.append("unban")
            reasons.append(f"unban: {e.description}")

        if failed:
            return ActionResult(
                action="revoke",
                ok=False,
                reason="; ".join(reasons),
                failed_steps=tuple(failed),
            )

        logger.info("Membership revoked for chat_id=%s", identity.chat_id)
        return ActionResult(action="revoke", ok=True)
