"""AI style guide generator: brand voice guides and an admin blog writer."""
