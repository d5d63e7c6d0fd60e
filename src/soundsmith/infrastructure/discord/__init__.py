"""Discord gateway, voice and slash-command integration."""
