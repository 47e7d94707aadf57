import logging

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from memberbridge.api.v1.routers.checkout import router as checkout_router
from memberbridge.api.v1.routers.health import router as health_router
from memberbridge.api.v1.routers.stripe_webhook import router as stripe_router
from memberbridge.core.config import Settings, settings as default_settings
from memberbridge.integrations.stripe.client import StripeGateway
from memberbridge.integrations.telegram.bot_api import TelegramBotAPI
from memberbridge.services.dispatcher import EventDispatcher
from memberbridge.services.identity_resolver import StripeReader
from memberbridge.services.membership import MembershipActionExecutor

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(
    settings: Settings | None = None,
    *,
    stripe_gateway: StripeGateway | None = None,
    stripe_reader: StripeReader | None = None,
    bot: TelegramBotAPI | None = None,
) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings)

    if stripe_gateway is None:
        api_key = settings.stripe_api_key
        stripe_gateway = StripeGateway(api_key.get_secret_value() if api_key else None)

    if bot is None:
        token = settings.telegram_bot_token
        bot = TelegramBotAPI(
            token=token.get_secret_value() if token else "",
            base_url=settings.telegram_api_base,
            timeout=settings.telegram_timeout_sec,
        )

    executor = MembershipActionExecutor.from_settings(settings, bot)
    dispatcher = EventDispatcher(
        settings,
        reader=stripe_reader or stripe_gateway,
        executor=executor,
    )

    app = FastAPI(title="MemberBridge", version="0.1.0")
    app.state.settings = settings
    app.state.stripe_gateway = stripe_gateway
    app.state.dispatcher = dispatcher

    app.include_router(stripe_router)
    app.include_router(checkout_router)
    app.include_router(health_router, prefix="/api/v1")

    @app.get("/", response_class=PlainTextResponse)
    def root() -> str:
        return "OK"

    @app.on_event("startup")
    def validate_settings() -> None:
        if settings.env == "test":
            return
        missing = settings.missing_required
        if missing:
            raise RuntimeError(f"{', '.join(missing)} missing. Check your .env file.")
        logger.info("MemberBridge ready (group=%s)", settings.group_chat_id)

    return app


app = create_app()
