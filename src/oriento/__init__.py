"""Oriento: SMB financial-education assistant API backed by Gemini."""
