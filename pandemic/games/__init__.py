"""
Games module - Game-specific data.

Each game has its own subpackage with the static board and card data
the engine builds decks from.
"""
