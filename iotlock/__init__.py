"""Client logic for the IoT smart-lock visitor app."""
