"""
Outbound notifications (SMS)
"""

from .sms_gateway import SmsNotificationGateway
from .templates import format_price, render_message

__all__ = ["SmsNotificationGateway", "format_price", "render_message"]
