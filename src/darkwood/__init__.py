"""Darkwood - a werewolf game of runes and moonlight."""
