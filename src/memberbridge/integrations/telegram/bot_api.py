"""Sync wrapper around the handful of Telegram Bot API methods we need."""

from __future__ import annotations

from typing import Any, Dict, Mapping

import requests


class TelegramBotAPIError(RuntimeError):
    """Raised when a Bot API call fails at the transport or API level."""

    def __init__(self, method: str, description: str, *, status_code: int | None = None) -> None:
        message = f"Telegram Bot API call '{method}' failed: {description}"
        if status_code is not None:
            message = f"{message} (status={status_code})"
        super().__init__(message)
        self.method = method
        self.description = description
        self.status_code = status_code


class TelegramBotAPI:
    def __init__(
        self,
        *,
        token: str,
        base_url: str = "https://api.telegram.org",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def _method_url(self, method: str) -> str:
        return f"{self._base_url}/bot{self._token}/{method}"

    def _redact(self, text: str) -> str:
        return text.replace(self._token, "<token>") if self._token else text

    def call(self, method: str, *, params: Mapping[str, Any] | None = None) -> Any:
        """Execute a Bot API method and return its ``result``."""

        if not self._token:
            raise TelegramBotAPIError(method, "TELEGRAM_BOT_TOKEN is not configured")

        try:
            response = self._session.post(
                self._method_url(method),
                json=dict(params or {}),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise TelegramBotAPIError(method, self._redact(str(e))) from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not isinstance(payload, dict):
            raise TelegramBotAPIError(
                method, self._redact(response.text or "non-JSON response"), status_code=response.status_code
            )

        # Telegram reports API errors as {"ok": false, "description": ...}, usually with a 4xx
        if response.status_code != 200 or not payload.get("ok"):
            description = payload.get("description") or "unknown error"
            raise TelegramBotAPIError(method, self._redact(str(description)), status_code=response.status_code)

        return payload.get("result")

    def create_chat_invite_link(
        self,
        chat_id: int | str,
        *,
        member_limit: int,
        expire_date: int,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "chat_id": chat_id,
            "member_limit": member_limit,
            "expire_date": expire_date,
        }
        return self.call("createChatInviteLink", params=params)

    def send_message(
        self,
        chat_id: int | str,
        text: str,
        *,
        parse_mode: str | None = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode:
            params["parse_mode"] = parse_mode
        return self.call("sendMessage", params=params)

    def ban_chat_member(self, chat_id: int | str, user_id: int | str) -> bool:
        return bool(self.call("banChatMember", params={"chat_id": chat_id, "user_id": user_id}))

    def unban_chat_member(self, chat_id: int | str, user_id: int | str) -> bool:
        return bool(self.call("unbanChatMember", params={"chat_id": chat_id, "user_id": user_id}))


__all__ = [
    "TelegramBotAPI",
    "TelegramBotAPIError",
]
