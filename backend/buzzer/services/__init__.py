"""Tournament domain services: bracket, round lifecycle and timers.

This package contains pure(ish) domain logic that is driven by the
dispatcher, keeping Socket.IO transport concerns separated from core
game mechanics.
"""
