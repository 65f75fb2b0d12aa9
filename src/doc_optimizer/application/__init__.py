"""Application – caller-facing admission control."""
