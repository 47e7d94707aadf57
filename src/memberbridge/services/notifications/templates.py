INVITE_PARSE_MODE = "Markdown"


def invite_message_text(tier_label: str, invite_url: str) -> str:
    lines = [
        f"✅ {tier_label} activated.",
        f"Join the group: {invite_url}",
        "",
        "Reminder: digital membership; does not guarantee employment.",
    ]
    return "\n".join(lines)
