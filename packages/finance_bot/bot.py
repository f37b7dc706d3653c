"""Telegram transport built on python-telegram-bot's async ``Application``.

Handlers are thin: they pull text out of the update, push the blocking core
call (SQLAlchemy, the LLM request, matplotlib) onto a worker thread with
``asyncio.to_thread`` and send back whatever the formatting layer produced.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime

from telegram import BotCommand, Update
from telegram.constants import ChatAction, ParseMode
from telegram.error import TelegramError
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from .formatting import (
    CHART_CAPTION,
    GENERIC_FAILURE_TEXT,
    NOTHING_TO_DELETE_TEXT,
    chart_title,
    format_confirmation,
    format_deleted,
    format_empty_month,
    format_help,
    format_monthly_report,
)
from .logging_setup import get_logger
from .parser import parse_message
from .runtime import Services

_logger = get_logger("finance_bot.bot")

WEBHOOK_PATH = "webhook"
DEFAULT_DISPLAY_NAME = "You"

# New messages only: an edited message would record its transaction twice.
ALLOWED_UPDATES = [Update.MESSAGE]
_NEW_MESSAGES = filters.UpdateType.MESSAGE

BOT_COMMANDS: tuple[tuple[str, str], ...] = (
    ("start", "How to record transactions"),
    ("help", "How to record transactions"),
    ("balanco", "Monthly report with chart"),
    ("delete", "Delete the last transaction"),
)


def _display_name(update: Update) -> str:
    user = update.effective_user
    if user is None:
        return DEFAULT_DISPLAY_NAME
    return user.first_name or user.username or DEFAULT_DISPLAY_NAME


class FinanceBot:
    """Chat handlers bound to one set of :class:`Services`.

    Parameters
    ----------
    services:
        Wired store, recorder, aggregator and chart renderer.
    clock:
        Source of "now" for picking the report month.
    """

    def __init__(
        self, services: Services, *, clock: Callable[[], datetime] = datetime.now
    ) -> None:
        self._services = services
        self._clock = clock

    @property
    def _currency(self) -> str:
        return self._services.settings.currency

    async def help(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        if message is None:
            return
        user = update.effective_user
        text = format_help(
            user.first_name if user else None,
            tracks_payment_method=self._services.recorder.policy.tracks_payment_method,
        )
        await message.reply_text(text, parse_mode=ParseMode.MARKDOWN)

    async def monthly_report(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        if message is None:
            return
        now = self._clock()
        report = await asyncio.to_thread(
            self._services.aggregator.monthly_report, now.month, now.year
        )
        if report is None:
            await message.reply_text(format_empty_month(now.month, now.year))
            return

        await message.reply_text(
            format_monthly_report(report, self._currency), parse_mode=ParseMode.MARKDOWN
        )

        series = report.chart_series()
        if not series:
            return
        try:
            image = await asyncio.to_thread(
                self._services.renderer.render, series, chart_title(report.month, report.year)
            )
        except Exception:  # noqa: BLE001 - the text report already went out
            _logger.exception("chart rendering failed for %02d/%d", report.month, report.year)
            return
        await message.reply_photo(photo=image, caption=CHART_CAPTION)

    async def delete_last(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        if message is None:
            return
        deleted = await asyncio.to_thread(self._services.recorder.delete_last)
        if deleted is None:
            await message.reply_text(NOTHING_TO_DELETE_TEXT)
            return
        await message.reply_text(
            format_deleted(deleted, self._currency), parse_mode=ParseMode.MARKDOWN
        )

    async def record(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        if message is None or not message.text:
            return
        tracks_method = self._services.recorder.policy.tracks_payment_method
        if parse_message(message.text, payment_suffix=tracks_method) is None:
            return

        await message.chat.send_action(ChatAction.TYPING)
        confirmation = await asyncio.to_thread(
            self._services.recorder.record, message.text, _display_name(update)
        )
        if confirmation is None:
            return
        await message.reply_text(format_confirmation(confirmation, self._currency))

    async def on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        _logger.error("error while handling an update", exc_info=context.error)
        if isinstance(update, Update) and update.effective_message is not None:
            await update.effective_message.reply_text(GENERIC_FAILURE_TEXT)

    def register(self, application: Application) -> None:
        application.add_handler(CommandHandler(["start", "help"], self.help, filters=_NEW_MESSAGES))
        application.add_handler(
            CommandHandler("balanco", self.monthly_report, filters=_NEW_MESSAGES)
        )
        application.add_handler(CommandHandler("delete", self.delete_last, filters=_NEW_MESSAGES))
        application.add_handler(
            MessageHandler(_NEW_MESSAGES & filters.TEXT & ~filters.COMMAND, self.record)
        )
        application.add_error_handler(self.on_error)


def build_application(services: Services) -> Application:
    """Build the ``Application`` with handlers and startup/shutdown hooks."""

    async def post_init(application: Application) -> None:
        await application.bot.set_my_commands(
            [BotCommand(command, description) for command, description in BOT_COMMANDS]
        )

    async def post_shutdown(application: Application) -> None:
        try:
            if services.settings.webhook_url:
                await application.bot.delete_webhook()
                _logger.info("webhook removed")
        except TelegramError:
            _logger.warning("could not remove the webhook", exc_info=True)
        finally:
            services.close()
            _logger.info("ledger store closed")

    application = (
        Application.builder()
        .token(services.settings.require_bot_token())
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )
    FinanceBot(services).register(application)
    return application


def run(services: Services) -> None:
    """Run the bot until interrupted: webhook mode when configured, else polling."""

    application = build_application(services)
    settings = services.settings
    if settings.webhook_url:
        _logger.info("starting in webhook mode on port %d", settings.port)
        application.run_webhook(
            listen="0.0.0.0",
            port=settings.port,
            url_path=WEBHOOK_PATH,
            webhook_url=f"{settings.webhook_url}/{WEBHOOK_PATH}",
            allowed_updates=ALLOWED_UPDATES,
        )
    else:
        _logger.info("starting in polling mode")
        application.run_polling(allowed_updates=ALLOWED_UPDATES)


__all__ = ["ALLOWED_UPDATES", "BOT_COMMANDS", "FinanceBot", "build_application", "run"]
