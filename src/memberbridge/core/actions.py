from dataclasses import dataclass
from typing import Union

from memberbridge.core.identity import SubscriberIdentity


@dataclass(frozen=True)
class Invite:
    identity: SubscriberIdentity
    tier_label: str


@dataclass(frozen=True)
class Revoke:
    identity: SubscriberIdentity


# Computed per event, executed at most once, never queued
MembershipAction = Union[Invite, Revoke]
