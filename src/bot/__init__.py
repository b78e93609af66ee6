"""Conversation event handling for the roman webhook."""

from src.bot.broadcast import BroadcastSequencer
from src.bot.dispatcher import CommandDispatcher
from src.bot.handlers import EventHandlers, HandlerContext

__all__ = [
    "BroadcastSequencer",
    "CommandDispatcher",
    "EventHandlers",
    "HandlerContext",
]
