"""Harbor - offline request agent.

Intercepts outbound requests for a client application, answers them from a
bounded local cache or the network, and reconciles queued writes with a
remote endpoint once connectivity returns.
"""

__version__ = "0.1.0"
