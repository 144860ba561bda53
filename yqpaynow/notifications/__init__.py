"""Outbound notifications (SMS)."""

from .sms import Msg91Client, SmsDeliveryError, SmsResult, clean_phone_number

__all__ = ["Msg91Client", "SmsDeliveryError", "SmsResult", "clean_phone_number"]
