"""Activity bodies run behind the recovery protocol."""

from .url_reward import complete_url_reward

__all__ = ["complete_url_reward"]
