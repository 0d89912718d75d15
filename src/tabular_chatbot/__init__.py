"""Chat-driven table viewer: type a command, browse the matching dataset."""
