"""Core generation components: configuration, model client, session."""
