"""Confirmation prompts the controller awaits before destructive actions."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Literal, Optional


@dataclass(frozen=True)
class ConfirmationOptions:
    title: str
    message: str
    confirm_text: str = "Confirm"
    cancel_text: str = "Cancel"
    type: Literal["info", "warning", "danger"] = "info"


class Confirmer:
    async def confirm(self, options: ConfirmationOptions) -> bool:
        raise NotImplementedError


class StaticConfirmer(Confirmer):
    """Answers every prompt the same way and records what was asked."""

    def __init__(self, answer: bool):
        self.answer = answer
        self.asked: list[ConfirmationOptions] = []

    async def confirm(self, options: ConfirmationOptions) -> bool:
        self.asked.append(options)
        return self.answer


class PromptConfirmer(Confirmer):
    """One prompt at a time, settled from outside by ``respond`` or ``dismiss``.

    ``confirm`` suspends until the prompt is answered; dismissing counts as a
    refusal.
    """

    def __init__(self):
        self.pending: Optional[ConfirmationOptions] = None
        self._future: Optional[asyncio.Future] = None

    @property
    def is_open(self) -> bool:
        return self._future is not None and not self._future.done()

    async def confirm(self, options: ConfirmationOptions) -> bool:
        if self.is_open:
            self.dismiss()
        self.pending = options
        future = self._future = asyncio.get_running_loop().create_future()
        try:
            return await future
        finally:
            # A newer prompt may have replaced this one while it was settling.
            if self._future is future:
                self.pending = None

    def respond(self, answer: bool) -> None:
        if self.is_open:
            self._future.set_result(bool(answer))

    def dismiss(self) -> None:
        self.respond(False)
