from fastapi import Request

from memberbridge.core.config import Settings
from memberbridge.integrations.stripe.client import StripeGateway
from memberbridge.services.dispatcher import EventDispatcher


def app_settings(request: Request) -> Settings:
    """FastAPI dependency: the Settings the app was built with"""
    return request.app.state.settings


def event_dispatcher(request: Request) -> EventDispatcher:
    return request.app.state.dispatcher


def stripe_gateway(request: Request) -> StripeGateway:
    return request.app.state.stripe_gateway
