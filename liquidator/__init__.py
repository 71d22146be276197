"""Lending-protocol liquidator: position monitoring and liquidation core."""

__version__ = "0.1.0"
