"""Kernel – error hierarchy and clock primitives shared by every layer."""
