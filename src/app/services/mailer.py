from abc import ABC, abstractmethod


class IMailer(ABC):
    """Outbound e-mail contract used by the application layer"""

    @abstractmethod
    async def send_password_reset(self, email: str, token: str) -> None:
        """Deliver a password reset token to the given address"""
        pass
