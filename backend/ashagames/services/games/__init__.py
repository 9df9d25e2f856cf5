"""Game domain services: the mini-game engine, timers, scoring and session hosting.

The engine and rule sets are plain Python objects driven by a scheduler;
``sessions`` and ``progress`` connect them to the Flask app, Socket.IO and
the database, keeping transport concerns out of the game mechanics.
"""
