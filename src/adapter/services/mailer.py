import logging

from src.app.services.mailer import IMailer

logger = logging.getLogger(__name__)


class LoggingMailer(IMailer):
    """
    Mailer used until an SMTP/API provider is configured.

    Records that a message was due without including the token.
    """

    async def send_password_reset(self, email: str, token: str) -> None:
        logger.info("Password reset e-mail queued for %s", email)
