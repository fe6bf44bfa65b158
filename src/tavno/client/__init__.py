from tavno.client.subscriber import QuestEventSubscriber

__all__ = ["QuestEventSubscriber"]
