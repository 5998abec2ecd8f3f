"""Call Insights: анализ транскриптов звонков службы поддержки для mock CRM."""

__version__ = "0.1.0"
