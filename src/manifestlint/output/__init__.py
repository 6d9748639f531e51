"""Output layer: turns ServiceResult envelopes into text for the terminal."""
