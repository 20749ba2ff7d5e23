# src/weather_dashboard/providers/__init__.py
"""Weather provider adapters: request builders + normalizers per upstream schema."""
