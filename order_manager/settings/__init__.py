# Settings package
from order_manager.settings.app import AppSettings, get_app_settings

__all__ = ["get_app_settings", "AppSettings"]
