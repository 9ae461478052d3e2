from .prompt_feed import FeedStats, PromptFeed, VoteOutcome

__all__ = ["FeedStats", "PromptFeed", "VoteOutcome"]
