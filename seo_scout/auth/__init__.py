"""seo_scout.auth: обмен OAuth-кодов и обновление токенов Google."""
from seo_scout.auth.token_broker import TokenBroker

__all__ = ["TokenBroker"]
