"""Core building blocks: block store, providers, similarity and editor collaborators."""
