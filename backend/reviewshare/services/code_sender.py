"""
ReviewShare Backend — Confirmation Code Delivery
=================================================

What:  Abstract interface for delivering registration confirmation codes,
       plus the default implementation that writes them to the server log.
How:   UserService receives a sender and calls send_code() whenever it issues
       a new code (register, resend). Concrete senders (email, SMS) implement
       the same interface.
Who:   Constructed in the app lifespan and stored on `app.state.code_sender`.
"""

import logging
from abc import ABC, abstractmethod

from fastapi import Request


class ConfirmationCodeSender(ABC):
    """
    Contract:
        - send_code() hands a freshly issued plaintext code to the user
        - The code is never persisted in plaintext by the caller
        - Implementations raise on delivery failure; the caller does not retry
    """

    @abstractmethod
    async def send_code(self, user_id: str, code: str) -> None:
        ...


class LoggingCodeSender(ConfirmationCodeSender):
    """Development sender: logs the code at INFO on `reviewshare.confirmation`."""

    def __init__(self) -> None:
        self._logger = logging.getLogger("reviewshare.confirmation")

    async def send_code(self, user_id: str, code: str) -> None:
        self._logger.info("Confirmation code for %s: %s", user_id, code)


def get_code_sender(request: Request) -> ConfirmationCodeSender:
    sender = getattr(request.app.state, "code_sender", None)
    if sender is None:
        sender = LoggingCodeSender()
        request.app.state.code_sender = sender
    return sender
