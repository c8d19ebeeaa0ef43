"""HTTP surface of the PromptQL service."""
