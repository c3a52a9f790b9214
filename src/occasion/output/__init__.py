"""Output layer: turning ServiceResult into text for the terminal."""
